"""Review data models.

A Review is built once per run from agent output, consumed once by the
publisher and then discarded. Nothing here is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reviewbot_core.failures import Failure


class Side(str, Enum):
    """Which version of the file a comment's line number refers to."""

    RIGHT = "RIGHT"  # head / new version
    LEFT = "LEFT"  # base / old version


@dataclass(frozen=True)
class ReviewComment:
    """A single inline comment anchored to one line of one file."""

    path: str
    line: int
    body: str
    side: Side = Side.RIGHT
    severity: str | None = None

    def decorated_body(self) -> str:
        if self.severity:
            return f"({self.severity}) {self.body}"
        return self.body


@dataclass(frozen=True)
class Review:
    summary: str = ""
    comments: tuple[ReviewComment, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.summary and not self.comments


class Publication(str, Enum):
    REVIEW = "review"  # one inline review object
    COMMENT = "comment"  # one plain conversation comment
    PLACEHOLDER = "placeholder"  # fixed "no review could be generated" comment
    FAILURE = "failure"  # classified failure comment
    SHADOW = "shadow"  # printed to the terminal, nothing posted


@dataclass
class ReviewOutcome:
    """Result returned by run_review so the CLI can report what was published."""

    publication: Publication
    review: Review | None = None
    failure: Failure | None = None
