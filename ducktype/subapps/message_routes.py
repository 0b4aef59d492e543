from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ducktype.database import get_db
from ducktype.schemas.conversations import DeletedOut, InsertedOut, LegacyMessageOut, MessageIn
from ducktype.services.message_service import MessageService


router = APIRouter(tags=["messages"])


# Legacy flat message log, newest first
@router.get("/messages", response_model=list[LegacyMessageOut])
def list_messages(db: Session = Depends(get_db)):
    return MessageService(db).list_messages()


@router.post("/messages", response_model=InsertedOut)
def create_message(payload: MessageIn, db: Session = Depends(get_db)):
    return MessageService(db).create_message(payload)


@router.delete("/messages/{message_id}", response_model=DeletedOut)
def delete_message(message_id: str, db: Session = Depends(get_db)):
    return MessageService(db).delete_message(message_id)
