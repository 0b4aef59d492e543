from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional, Sequence

import openai
from openai import AsyncOpenAI

from ducktype.services.openai_compatible_client import get_async_openai_compatible_client


logger = logging.getLogger(__name__)

DEFAULT_MODEL = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}

# Low temperature keeps the JSON shape stable between calls
TEMPERATURE = 0.2


# JSON-schema hint asking for an object with a single string-array field
def list_response_format(field: str, *, min_items: int, max_items: int) -> dict:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": f"{field}_list",
            "schema": {
                "type": "object",
                "properties": {
                    field: {
                        "type": "array",
                        "items": {"type": "string"},
                        "minItems": min_items,
                        "maxItems": max_items,
                    },
                },
                "required": [field],
            },
        },
    }


def _first_candidate_text(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""


class GenerationClient:
    """One-shot calls to the upstream text generator.

    ``generate`` never raises for upstream trouble (bad status, connection
    errors, empty candidates); it returns ``""`` and lets the caller's
    fallback policy decide what to do. Only a missing credential or an
    unknown provider raises, as ``GenerationUnavailableError``.
    """

    def __init__(
        self,
        *,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        client_factory: Callable[[Optional[str]], AsyncOpenAI] = get_async_openai_compatible_client,
    ):
        self.provider = (provider or os.getenv("GENERATION_PROVIDER") or "gemini").strip().lower()
        self.model = model or os.getenv("GENERATION_MODEL") or DEFAULT_MODEL.get(self.provider, "")
        self._client_factory = client_factory

    async def generate(
        self,
        instructions: str,
        context_messages: Sequence[dict],
        *,
        list_field: str,
        min_items: int = 1,
        max_items: int = 6,
        max_output_tokens: int = 256,
    ) -> str:
        client = self._client_factory(self.provider)
        messages = [{"role": "system", "content": instructions}, *context_messages]
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=TEMPERATURE,
                max_tokens=max_output_tokens,
                response_format=list_response_format(list_field, min_items=min_items, max_items=max_items),
            )
        except openai.APIStatusError as e:
            logger.warning("generation.upstream.status: provider=%s status=%s", self.provider, e.status_code)
            return ""
        except openai.APIError as e:
            logger.warning("generation.upstream.error: provider=%s err=%s", self.provider, e)
            return ""
        finally:
            try:
                await client.close()
            except Exception:
                pass

        text = _first_candidate_text(response)
        if not text:
            logger.info("generation.empty: provider=%s model=%s", self.provider, self.model)
        return text


# FastAPI dependency; tests override it with a scripted fake
def get_generation_client() -> GenerationClient:
    return GenerationClient()
