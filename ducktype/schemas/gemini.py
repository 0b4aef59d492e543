from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class TurnPart(BaseModel):
    model_config = ConfigDict(extra="ignore")
    text: str = ""


# One prior turn; accepts the Gemini-native `parts` shape and the plain `content` shape
class ConversationTurn(BaseModel):
    model_config = ConfigDict(extra="ignore")
    role: str = "user"
    parts: Optional[List[TurnPart]] = None
    content: Optional[str] = None

    def text(self) -> str:
        if self.parts:
            return "\n".join(p.text for p in self.parts if p.text)
        return self.content or ""

    def chat_role(self) -> str:
        return "assistant" if self.role.strip().lower() in ("model", "assistant") else "user"


class SocraticRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")
    conversation: Optional[List[ConversationTurn]] = None


class QuestionsOut(BaseModel):
    questions: List[str]


# Summaries of recent conversations, only used when the first generation attempt yields nothing
class StarterPromptsRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")
    summaries: Optional[List[str]] = None


class PromptsOut(BaseModel):
    prompts: List[str]
