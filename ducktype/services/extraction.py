"""Turn raw model output into a short list of strings.

The model is asked for JSON, but it does not always comply: it may wrap the
object in prose, emit a bare array literal, or fall back to a bulleted list.
``extract`` tries a fixed cascade of parsers, strictest first, and returns the
result of the first one that finds anything. Later parsers are lossy, so the
order matters: a well-formed object must never be shadowed by the line parser.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Optional

MAX_ITEMS = 6

_ARRAY_LITERAL_RE = re.compile(r"\[([\s\S]*?)\]")
_QUOTED_RE = re.compile(r"\"([^\"]+)\"|'([^']+)'")
_LIST_MARKER_RE = re.compile(r"^[-\d.)\s•*]+")
_MIN_LINE_CHARS = 3
_WORD_RE = re.compile(r"\w")

Strategy = Callable[[str, str], Optional[list]]


# Keeps non-empty strings, trimmed, in order
def _clean(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []
    out: list[str] = []
    for item in items:
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
    return out


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError, RecursionError):  # RecursionError: deeply nested arrays
        return None


def _named_field(parsed: Any, field: str) -> Optional[list]:
    if isinstance(parsed, dict) and isinstance(parsed.get(field), list):
        return parsed[field]
    return None


def parse_direct_json(text: str, field: str) -> Optional[list]:
    parsed = _loads(text)
    if isinstance(parsed, list):
        return parsed
    return _named_field(parsed, field)


def parse_embedded_object(text: str, field: str) -> Optional[list]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return _named_field(_loads(text[start:end + 1]), field)


def parse_array_literal(text: str, field: str) -> Optional[list]:
    match = _ARRAY_LITERAL_RE.search(text)
    if not match or not match.group(1):
        return None
    inner = match.group(1)
    quoted = [m.group(1) or m.group(2) for m in _QUOTED_RE.finditer(inner)]
    quoted = [q for q in quoted if q]
    if quoted:
        return quoted
    return [re.sub(r"[\"'\r\n]", "", piece).strip() for piece in inner.split(",")]


def parse_lines(text: str, field: str) -> Optional[list]:
    lines = (_LIST_MARKER_RE.sub("", line).strip() for line in text.splitlines())
    # punctuation-only lines are noise, not prompts
    return [line for line in lines if len(line) > _MIN_LINE_CHARS and _WORD_RE.search(line)]


STRATEGIES: tuple[Strategy, ...] = (
    parse_direct_json,
    parse_embedded_object,
    parse_array_literal,
    parse_lines,
)


def extract(raw: Optional[str], field: str = "prompts", limit: int = MAX_ITEMS) -> list[str]:
    """Return up to ``limit`` (never more than 6) strings from ``raw``.

    ``field`` names the array inside a JSON object (``{"prompts": [...]}``).
    An empty list means every strategy failed; callers hand that to a
    fallback policy rather than treating it as an error.
    """
    if not isinstance(raw, str) or not raw.strip():
        return []
    limit = max(0, min(limit, MAX_ITEMS))
    for strategy in STRATEGIES:
        items = _clean(strategy(raw, field))
        if items:
            return items[:limit]
    return []
