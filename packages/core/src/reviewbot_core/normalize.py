"""Turn raw agent output into one Review.

Structured payload first, free text second, nothing third: an agent that
ignores the schema but writes useful prose still produces a review.
Comments that cannot be placed are dropped without failing the review.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from reviewbot_core.models import Review, ReviewComment, Side

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _coerce_line(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value.isdecimal():
            return None
        value = int(value)
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        return None
    return value


def _coerce_side(value: Any) -> Side:
    try:
        return Side(str(value).upper())
    except ValueError:
        return Side.RIGHT


def coerce_comment(raw: Any) -> ReviewComment | None:
    """Build a ReviewComment from one agent-supplied entry, or None if it is unusable."""
    if not isinstance(raw, dict):
        return None
    path = _text(raw.get("path"))
    line = _coerce_line(raw.get("line"))
    body = _text(raw.get("body"))
    if not path or line is None or not body:
        return None
    return ReviewComment(
        path=path,
        line=line,
        body=body,
        side=_coerce_side(raw.get("side", Side.RIGHT.value)),
        severity=_text(raw.get("severity")) or None,
    )


def _as_payload(structured: Any) -> dict:
    if isinstance(structured, str):
        try:
            structured = json.loads(structured)
        except json.JSONDecodeError:
            return {}
    return structured if isinstance(structured, dict) else {}


def normalize(structured: Any, fallback_text: str | None) -> Review | None:
    payload = _as_payload(structured)
    fallback = _text(fallback_text)
    if not payload and not fallback:
        return None

    raw_comments = payload.get("comments")
    comments = []
    if isinstance(raw_comments, (list, tuple)):
        for raw in raw_comments:
            comment = coerce_comment(raw)
            if comment is not None:
                comments.append(comment)
        if len(comments) < len(raw_comments):
            logger.debug("Dropped %d unusable comment(s)", len(raw_comments) - len(comments))

    summary = _text(payload.get("summary")) or fallback

    review = Review(summary=summary, comments=tuple(comments))
    if review.is_empty:
        return None
    return review
