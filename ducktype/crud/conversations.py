from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ducktype.models.conversation_models import Conversation


def utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Renders a stored (naive UTC) timestamp as ISO-8601 with an explicit offset
def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _scoped(session: Session, conversation_id: str, user_id: Optional[str]):
    query = session.query(Conversation).filter(Conversation.id == conversation_id)
    if user_id is not None:
        query = query.filter(Conversation.user_id == user_id)
    return query


# Never let updatedAt move backwards, even if the clock does
def _next_timestamp(conv: Conversation) -> datetime:
    now = utcnow_naive()
    if conv.updated_at is not None and now < conv.updated_at:
        return conv.updated_at
    return now


# List conversations (optionally for one owner), most recently updated first
def list_conversations(session: Session, user_id: Optional[str] = None) -> list[Conversation]:
    query = session.query(Conversation)
    if user_id is not None:
        query = query.filter(Conversation.user_id == user_id)
    return query.order_by(Conversation.updated_at.desc(), Conversation.created_at.desc()).all()


# Create an empty conversation with both timestamps set to now
def create_conversation(session: Session, *, title: str, user_id: Optional[str] = None) -> Conversation:
    now = utcnow_naive()
    conv = Conversation(user_id=user_id, title=title, messages=[], created_at=now, updated_at=now)
    session.add(conv)
    session.flush()
    return conv


def get_conversation(
    session: Session,
    conversation_id: str,
    user_id: Optional[str] = None,
    *,
    for_update: bool = False,
) -> Optional[Conversation]:
    query = _scoped(session, conversation_id, user_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


# Push a message and bump updatedAt on the locked row; returns the stored message or None
def append_message(
    session: Session,
    conversation_id: str,
    *,
    user: str,
    ai,
    user_id: Optional[str] = None,
) -> Optional[dict]:
    conv = get_conversation(session, conversation_id, user_id, for_update=True)
    if conv is None:
        return None
    now = _next_timestamp(conv)
    message = {"user": user, "ai": ai, "createdAt": isoformat_utc(now)}
    # JSON columns only track reassignment
    conv.messages = [*(conv.messages or []), message]
    conv.updated_at = now
    session.flush()
    return message


# Replace the aha moment wholesale
def set_aha_moment(
    session: Session,
    conversation_id: str,
    text: str,
    user_id: Optional[str] = None,
) -> Optional[Conversation]:
    conv = get_conversation(session, conversation_id, user_id, for_update=True)
    if conv is None:
        return None
    now = _next_timestamp(conv)
    conv.aha_moment = {"text": text, "createdAt": isoformat_utc(now)}
    conv.updated_at = now
    session.flush()
    return conv


def set_title(
    session: Session,
    conversation_id: str,
    title: str,
    user_id: Optional[str] = None,
) -> Optional[Conversation]:
    conv = get_conversation(session, conversation_id, user_id, for_update=True)
    if conv is None:
        return None
    conv.title = title
    conv.updated_at = _next_timestamp(conv)
    session.flush()
    return conv


# Returns True when a row was removed
def delete_conversation(session: Session, conversation_id: str, user_id: Optional[str] = None) -> bool:
    deleted = _scoped(session, conversation_id, user_id).delete(synchronize_session=False)
    return deleted > 0
