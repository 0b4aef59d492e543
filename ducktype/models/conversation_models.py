import uuid

from sqlalchemy import JSON, Column, DateTime, Index, String, Text

from ducktype.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


# One document per conversation; messages and the aha moment are embedded as JSON
class Conversation(Base):
    __tablename__ = "conversations"

    __table_args__ = (
        Index("ix_conversations_user_id_updated_at", "user_id", "updated_at"),
    )

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(64), index=True, nullable=True)
    title = Column(String(255), nullable=True)
    messages = Column(JSON, nullable=False, default=list)
    aha_moment = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


# Legacy flat collection kept for older clients (not linked to conversations)
class LegacyMessage(Base):
    __tablename__ = "messages"

    id = Column(String(32), primary_key=True, default=_new_id)
    user = Column(Text, nullable=False)
    ai = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
