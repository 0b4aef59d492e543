from __future__ import annotations

import re
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ducktype.crud import messages as messages_crud
from ducktype.crud.conversations import isoformat_utc
from ducktype.schemas.conversations import DeletedOut, InsertedOut, LegacyMessageOut, MessageIn, reply_lines


_ID_RE = re.compile(r"^[0-9a-f]{32}$")


# The flat legacy `messages` collection; independent of conversations
class MessageService:
    def __init__(self, db: Session):
        self.db = db

    def list_messages(self) -> list[LegacyMessageOut]:
        return [
            LegacyMessageOut(id=str(m.id), user=m.user, ai=m.ai, created_at=isoformat_utc(m.created_at))
            for m in messages_crud.list_messages(self.db)
        ]

    def create_message(self, payload: MessageIn) -> InsertedOut:
        if not payload.user or not reply_lines(payload.ai):
            raise HTTPException(status_code=400, detail="invalid payload")
        msg = messages_crud.create_message(self.db, user=payload.user, ai=payload.ai)
        self.db.commit()
        return InsertedOut(inserted_id=str(msg.id))

    def delete_message(self, message_id: Optional[str]) -> DeletedOut:
        if not message_id:
            raise HTTPException(status_code=400, detail="Missing id")
        if not _ID_RE.match(message_id):
            raise HTTPException(status_code=400, detail="Invalid id")
        if not messages_crud.delete_message(self.db, message_id):
            self.db.rollback()
            raise HTTPException(status_code=404, detail="Not found")
        self.db.commit()
        return DeletedOut(deleted_id=message_id)
