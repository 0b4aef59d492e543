from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ducktype.crud import conversations as conversations_crud
from ducktype.crud.conversations import isoformat_utc
from ducktype.models.conversation_models import Conversation
from ducktype.schemas.conversations import (
    AhaMomentOut,
    AppendedMessageOut,
    ConversationCreate,
    ConversationOut,
    ConversationPatch,
    ConversationPatchOut,
    DeletedOut,
    InsertedOut,
    MessageIn,
    MessageOut,
    reply_lines,
)


logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New conversation"


def _require_id(conversation_id: Optional[str]) -> str:
    if not conversation_id or not conversation_id.strip():
        raise HTTPException(status_code=400, detail="Missing id")
    return conversation_id.strip()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Not found")


def _message_out(raw: dict) -> MessageOut:
    return MessageOut(user=raw.get("user") or "", ai=raw.get("ai") or "", created_at=raw.get("createdAt"))


# Converts a stored row into the wire shape (string id, ISO timestamps)
def conversation_out(conv: Conversation) -> ConversationOut:
    aha = conv.aha_moment if isinstance(conv.aha_moment, dict) else None
    return ConversationOut(
        id=str(conv.id),
        user_id=conv.user_id,
        title=conv.title,
        messages=[_message_out(m) for m in (conv.messages or []) if isinstance(m, dict)],
        aha_moment=AhaMomentOut(text=aha.get("text") or "", created_at=aha.get("createdAt")) if aha else None,
        created_at=isoformat_utc(conv.created_at),
        updated_at=isoformat_utc(conv.updated_at),
    )


# CRUD over conversations; every mutating call commits exactly one transaction
class ConversationService:
    def __init__(self, db: Session):
        self.db = db

    def list_conversations(self, *, user_id: Optional[str] = None) -> list[ConversationOut]:
        return [conversation_out(c) for c in conversations_crud.list_conversations(self.db, user_id)]

    def create_conversation(self, payload: Optional[ConversationCreate]) -> InsertedOut:
        payload = payload or ConversationCreate()
        title = payload.title if payload.title and payload.title.strip() else DEFAULT_TITLE
        conv = conversations_crud.create_conversation(self.db, title=title, user_id=payload.user_id)
        self.db.commit()
        logger.info("conversation.create: id=%s user=%s", conv.id, payload.user_id)
        return InsertedOut(inserted_id=str(conv.id))

    def get_conversation(self, conversation_id: Optional[str], *, user_id: Optional[str] = None) -> ConversationOut:
        conversation_id = _require_id(conversation_id)
        conv = conversations_crud.get_conversation(self.db, conversation_id, user_id)
        if conv is None:
            raise _not_found()
        return conversation_out(conv)

    def update_conversation(
        self,
        conversation_id: Optional[str],
        payload: ConversationPatch,
        *,
        user_id: Optional[str] = None,
    ) -> ConversationPatchOut:
        conversation_id = _require_id(conversation_id)
        has_text = isinstance(payload.text, str) and bool(payload.text.strip())
        has_title = isinstance(payload.title, str) and bool(payload.title.strip())
        if not has_text and not has_title:
            raise HTTPException(status_code=400, detail="Missing or invalid text")

        conv = None
        if has_text:
            conv = conversations_crud.set_aha_moment(self.db, conversation_id, payload.text, user_id)
            if conv is None:
                self.db.rollback()
                raise _not_found()
        if has_title:
            conv = conversations_crud.set_title(self.db, conversation_id, payload.title.strip(), user_id)
            if conv is None:
                self.db.rollback()
                raise _not_found()
        self.db.commit()

        out = ConversationPatchOut()
        if has_text:
            aha = conv.aha_moment or {}
            out.aha_moment = AhaMomentOut(text=aha.get("text") or "", created_at=aha.get("createdAt"))
        if has_title:
            out.title = conv.title
        return out

    def delete_conversation(self, conversation_id: Optional[str], *, user_id: Optional[str] = None) -> DeletedOut:
        conversation_id = _require_id(conversation_id)
        if not conversations_crud.delete_conversation(self.db, conversation_id, user_id):
            self.db.rollback()
            raise _not_found()
        self.db.commit()
        logger.info("conversation.delete: id=%s", conversation_id)
        return DeletedOut(deleted_id=conversation_id)

    def append_message(
        self,
        conversation_id: Optional[str],
        payload: MessageIn,
        *,
        user_id: Optional[str] = None,
    ) -> AppendedMessageOut:
        conversation_id = _require_id(conversation_id)
        if not payload.user or not reply_lines(payload.ai):
            raise HTTPException(status_code=400, detail="Missing payload")
        message = conversations_crud.append_message(
            self.db,
            conversation_id,
            user=payload.user,
            ai=payload.ai,
            user_id=user_id,
        )
        if message is None:
            self.db.rollback()
            raise _not_found()
        self.db.commit()
        return AppendedMessageOut(message=_message_out(message))
