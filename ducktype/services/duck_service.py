from __future__ import annotations

import logging
import pathlib
import uuid
from typing import Optional, Sequence

from fastapi import HTTPException

from ducktype.schemas.gemini import ConversationTurn
from ducktype.services.extraction import extract
from ducktype.services.fallback import SOCRATIC_POLICY, STARTER_PROMPTS_POLICY
from ducktype.services.generation_client import GenerationClient


logger = logging.getLogger(__name__)
_PACKAGE_DIR = pathlib.Path(__file__).resolve().parents[1]

MAX_SUMMARIES = 5
MAX_SUMMARY_CHARS = 200


def _load_prompt(name: str) -> str:
    return (_PACKAGE_DIR / "resources" / name).read_text(encoding="utf-8").strip()


# Nonce keeps identical requests from being served identical (cached) completions
def _starter_request_turn() -> dict:
    return {"role": "user", "content": f"Provide starter prompts. nonce={uuid.uuid4()}"}


def _clean_summaries(summaries: Optional[Sequence[str]]) -> list[str]:
    out: list[str] = []
    for s in summaries or []:
        if isinstance(s, str) and s.strip():
            out.append(s.strip()[:MAX_SUMMARY_CHARS])
    return out[:MAX_SUMMARIES]


# Generation -> extraction -> fallback pipelines behind /gemini and /gemini/prompts
class DuckService:
    def __init__(self, generator: GenerationClient):
        self.generator = generator

    async def ask_questions(self, turns: Optional[Sequence[ConversationTurn]]) -> list[str]:
        context = [{"role": t.chat_role(), "content": t.text()} for t in (turns or []) if t.text().strip()]
        if not context:
            raise HTTPException(status_code=400, detail="Missing conversation")

        raw = await self.generator.generate(
            _load_prompt("socratic_prompt.txt"),
            context,
            list_field=SOCRATIC_POLICY.field,
            min_items=1,
            max_items=2,
            max_output_tokens=256,
        )
        questions = extract(raw, SOCRATIC_POLICY.field, SOCRATIC_POLICY.limit)
        # Socratic replies never take the context retry
        return await SOCRATIC_POLICY.ensure_non_empty(questions)

    async def starter_prompts(self, summaries: Optional[Sequence[str]] = None) -> list[str]:
        raw = await self.generator.generate(
            _load_prompt("starter_prompts_prompt.txt"),
            [_starter_request_turn()],
            list_field=STARTER_PROMPTS_POLICY.field,
            min_items=3,
            max_items=6,
            max_output_tokens=128,
        )
        prompts = extract(raw, STARTER_PROMPTS_POLICY.field, STARTER_PROMPTS_POLICY.limit)

        context = _clean_summaries(summaries)

        async def _retry_with_context() -> str:
            instructions = _load_prompt("starter_prompts_retry_prompt.txt") + "\n" + "\n".join(f"- {s}" for s in context)
            return await self.generator.generate(
                instructions,
                [_starter_request_turn()],
                list_field=STARTER_PROMPTS_POLICY.field,
                min_items=3,
                max_items=6,
                max_output_tokens=192,
            )

        # Retrying only helps when there is context the first call did not see
        return await STARTER_PROMPTS_POLICY.ensure_non_empty(prompts, _retry_with_context if context else None)
