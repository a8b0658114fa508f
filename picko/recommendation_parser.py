"""Extract a structured recommendation from free-form model output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

from picko.domain import StructuredRecommendation


_SUMMARY_RE = re.compile(r"^[ \t]*SUMMARY:[ \t]*(.*?)[ \t\r]*$", re.IGNORECASE | re.MULTILINE)
_CLOTHING_RE = re.compile(r"^[ \t]*CLOTHING:[ \t]*(.*?)[ \t\r]*$", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class ParseFailure:
    """Model output that did not follow the two-line protocol."""
    reason: str
    raw_text: str = ""


ParseResult = Union[StructuredRecommendation, ParseFailure]


def _split_tokens(payload: str) -> List[str]:
    """Split a comma-separated clothing payload into lower-cased tokens."""
    tokens = (token.strip().lower() for token in payload.split(","))
    return [token for token in tokens if token]


def parse_recommendation(raw_text: object) -> ParseResult:
    """
    Parse ``SUMMARY:`` and ``CLOTHING:`` lines out of generated text.

    The first match of each line wins. Tokens are not checked against the
    vocabulary and duplicates are kept. Never raises: anything unusable comes
    back as a ``ParseFailure``.
    """
    if not isinstance(raw_text, str):
        return ParseFailure(reason=f"expected text, got {type(raw_text).__name__}")

    summary_match = _SUMMARY_RE.search(raw_text)
    if not summary_match or not summary_match.group(1):
        return ParseFailure(reason="missing SUMMARY line", raw_text=raw_text)

    clothing_match = _CLOTHING_RE.search(raw_text)
    if not clothing_match:
        return ParseFailure(reason="missing CLOTHING line", raw_text=raw_text)

    items = _split_tokens(clothing_match.group(1))
    if not items:
        return ParseFailure(reason="CLOTHING line has no items", raw_text=raw_text)

    return StructuredRecommendation(summary=summary_match.group(1), clothing_items=items)
