from sqlalchemy.orm import Session

from ducktype.crud.conversations import utcnow_naive
from ducktype.models.conversation_models import LegacyMessage


def list_messages(session: Session) -> list[LegacyMessage]:
    return session.query(LegacyMessage).order_by(LegacyMessage.created_at.desc()).all()


def create_message(session: Session, *, user: str, ai) -> LegacyMessage:
    msg = LegacyMessage(user=user, ai=ai, created_at=utcnow_naive())
    session.add(msg)
    session.flush()
    return msg


def delete_message(session: Session, message_id: str) -> bool:
    deleted = session.query(LegacyMessage).filter(LegacyMessage.id == message_id).delete(synchronize_session=False)
    return deleted > 0
