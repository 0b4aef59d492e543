from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Match the column sizes in models/conversation_models.py
TITLE_MAX_CHARS = 255
USER_ID_MAX_CHARS = 64


# A stored assistant reply: older rows hold one string, newer rows a list of short questions
Reply = Union[str, List[str]]


# Normalizes either reply shape into a list of non-empty lines
def reply_lines(ai: Optional[Reply]) -> list[str]:
    if ai is None:
        return []
    if isinstance(ai, str):
        return [ai] if ai.strip() else []
    return [s for s in ai if isinstance(s, str) and s.strip()]


# Request body for appending a message (conversation-scoped or legacy)
class MessageIn(BaseModel):
    model_config = ConfigDict(extra="ignore")
    user: Optional[str] = None
    ai: Optional[Reply] = None


class MessageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    user: str
    ai: Reply
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class AhaMomentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    text: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class ConversationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    id: str = Field(alias="_id")
    user_id: Optional[str] = Field(default=None, alias="userId")
    title: Optional[str] = None
    messages: List[MessageOut] = Field(default_factory=list)
    aha_moment: Optional[AhaMomentOut] = Field(default=None, alias="ahaMoment")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class ConversationCreate(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_CHARS)
    user_id: Optional[str] = Field(default=None, alias="userId", max_length=USER_ID_MAX_CHARS)


# `text` sets the aha moment, `title` renames; at least one is required
class ConversationPatch(BaseModel):
    model_config = ConfigDict(extra="ignore")
    text: Optional[str] = None
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_CHARS)


class ConversationPatchOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    aha_moment: Optional[AhaMomentOut] = Field(default=None, alias="ahaMoment")
    title: Optional[str] = None


class AppendedMessageOut(BaseModel):
    message: MessageOut


class LegacyMessageOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    id: str = Field(alias="_id")
    user: str
    ai: Reply
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class InsertedOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    inserted_id: str = Field(alias="insertedId")


class DeletedOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    deleted_id: str = Field(alias="deletedId")
