from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ducktype.database import get_db
from ducktype.schemas.conversations import (
    AppendedMessageOut,
    ConversationCreate,
    ConversationOut,
    ConversationPatch,
    ConversationPatchOut,
    DeletedOut,
    InsertedOut,
    MessageIn,
    USER_ID_MAX_CHARS,
)
from ducktype.services.conversation_service import ConversationService


router = APIRouter(tags=["conversations"])

# Owner ids are stored in a 64-char column
OwnerId = Annotated[Optional[str], Query(max_length=USER_ID_MAX_CHARS)]


# Lists conversations, most recently updated first
@router.get("/conversations", response_model=list[ConversationOut])
def list_conversations(userId: OwnerId = None, db: Session = Depends(get_db)):
    return ConversationService(db).list_conversations(user_id=userId)


# Creates an empty conversation
@router.post("/conversations", response_model=InsertedOut)
def create_conversation(
    payload: Optional[ConversationCreate] = Body(None),
    db: Session = Depends(get_db),
):
    return ConversationService(db).create_conversation(payload)


@router.get("/conversations/{conversation_id}", response_model=ConversationOut)
def get_conversation(conversation_id: str, userId: OwnerId = None, db: Session = Depends(get_db)):
    return ConversationService(db).get_conversation(conversation_id, user_id=userId)


# Sets the aha moment (`text`) and/or the title
@router.patch(
    "/conversations/{conversation_id}",
    response_model=ConversationPatchOut,
    response_model_exclude_none=True,
)
def update_conversation(
    conversation_id: str,
    payload: ConversationPatch,
    userId: OwnerId = None,
    db: Session = Depends(get_db),
):
    return ConversationService(db).update_conversation(conversation_id, payload, user_id=userId)


@router.delete("/conversations/{conversation_id}", response_model=DeletedOut)
def delete_conversation(conversation_id: str, userId: OwnerId = None, db: Session = Depends(get_db)):
    return ConversationService(db).delete_conversation(conversation_id, user_id=userId)


# Appends one user/assistant exchange and bumps updatedAt
@router.post("/conversations/{conversation_id}/messages", response_model=AppendedMessageOut)
def append_message(
    conversation_id: str,
    payload: MessageIn,
    userId: OwnerId = None,
    db: Session = Depends(get_db),
):
    return ConversationService(db).append_message(conversation_id, payload, user_id=userId)
