from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from ducktype.services.extraction import MAX_ITEMS, extract


logger = logging.getLogger(__name__)

# Re-issues a generation call and returns the raw text
RetryFn = Callable[[], Awaitable[str]]


# Guarantees a usable list: extracted items, else one retry (if offered), else static defaults
@dataclass(frozen=True)
class FallbackPolicy:
    name: str
    field: str
    defaults: tuple[str, ...]
    limit: int = MAX_ITEMS

    def default_list(self) -> list[str]:
        return list(self.defaults)

    async def ensure_non_empty(self, extracted: Sequence[str], retry_fn: Optional[RetryFn] = None) -> list[str]:
        if extracted:
            return list(extracted)

        if retry_fn is not None:
            logger.info("%s.retry", self.name)
            retried = extract(await retry_fn(), self.field, self.limit)
            if retried:
                return retried

        logger.info("%s.fallback.defaults", self.name)
        return self.default_list()


STARTER_PROMPTS_POLICY = FallbackPolicy(
    name="prompts",
    field="prompts",
    defaults=(
        "What’s confusing me right now?",
        "What assumption might be wrong?",
        "What changed since it last worked?",
        "What input case breaks this?",
    ),
)

SOCRATIC_POLICY = FallbackPolicy(
    name="questions",
    field="questions",
    defaults=("What outcome are you expecting, and what are you observing instead?",),
    limit=2,
)
