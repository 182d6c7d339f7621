"""Recover a JSON object from a free-form model reply.

Recovery tiers, first hit wins:
    1. Fenced code block (```json ... ``` or ``` ... ```)
    2. Substring from the first "{" to the last "}"
    3. The whole trimmed reply

The chosen candidate is decoded once. A decode failure is final: the same
prompt rarely produces a different malformed reply, so nothing is retried.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Union

from services.errors import ParseError

logger = logging.getLogger(__name__)

_FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


@dataclass(frozen=True)
class FencedBlockFound:
    json_text: str
    data: Any


@dataclass(frozen=True)
class BraceScanUsed:
    json_text: str
    data: Any


@dataclass(frozen=True)
class RawTextUsed:
    json_text: str
    data: Any


@dataclass(frozen=True)
class ParseFailed:
    reason: str
    candidate: str = ""


ParseResult = Union[FencedBlockFound, BraceScanUsed, RawTextUsed, ParseFailed]


def find_fenced_block(text: str) -> str | None:
    """Inner content of the first fenced code block, if any."""
    match = _FENCED_BLOCK_RE.search(text)
    if match and match.group(1):
        return match.group(1).strip()
    return None


def find_brace_span(text: str) -> str | None:
    """Text from the first ``{`` to the last ``}``, if they are in that order."""
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        return text[first:last + 1]
    return None


def parse_response(text: str) -> ParseResult:
    """Pick a JSON candidate from ``text`` and decode it."""
    text = text or ""

    candidate = find_fenced_block(text)
    tier = FencedBlockFound
    if candidate is None:
        candidate = find_brace_span(text)
        tier = BraceScanUsed
    if candidate is None:
        candidate = text.strip()
        tier = RawTextUsed

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        return ParseFailed(reason=f"{tier.__name__}: {e}", candidate=candidate)

    return tier(json_text=candidate, data=data)


def parse_json_object(text: str) -> Any:
    """Decode the model reply or raise :class:`ParseError`."""
    result = parse_response(text)
    if isinstance(result, ParseFailed):
        logger.error("Model reply is not valid JSON (%s). Raw reply: %s", result.reason, text)
        raise ParseError("AI response was not valid JSON.")

    logger.debug("Recovered JSON via %s", type(result).__name__)
    return result.data
