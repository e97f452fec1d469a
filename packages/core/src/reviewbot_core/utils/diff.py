"""Unified diff helpers for placing inline review comments.

GitHub only accepts an inline comment on a line that appears in the PR diff:
added or context lines on the RIGHT side, removed or context lines on the
LEFT side. Anything else makes the whole review call fail with a 422.
"""

from __future__ import annotations

import re

from reviewbot_core.models import Side

_GIT_HEADER_RE = re.compile(r"^diff --git a/(.+) b/(.+)$")
_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,\d+)? \+(\d+)(?:,\d+)? @@")


def diff_anchors(diff: str) -> dict[str, dict[Side, set[int]]]:
    """Map each file path to the line numbers that accept inline comments, per side."""
    anchors: dict[str, dict[Side, set[int]]] = {}
    path: str | None = None
    in_hunk = False
    old_line = new_line = 0

    for line in (diff or "").splitlines():
        if line.startswith("diff --git "):
            match = _GIT_HEADER_RE.match(line)
            path = match.group(2) if match else None
            in_hunk = False
            continue

        if not in_hunk and line.startswith("+++ "):
            target = line[4:].strip()
            if target != "/dev/null":
                path = target[2:] if target.startswith("b/") else target
            continue

        hunk = _HUNK_RE.match(line)
        if hunk:
            old_line, new_line = int(hunk.group(1)), int(hunk.group(2))
            in_hunk = path is not None
            continue

        if not in_hunk:
            continue  # file headers: index, mode, ---

        sides = anchors.setdefault(path, {Side.RIGHT: set(), Side.LEFT: set()})
        if line.startswith("+"):
            sides[Side.RIGHT].add(new_line)
            new_line += 1
        elif line.startswith("-"):
            sides[Side.LEFT].add(old_line)
            old_line += 1
        elif line.startswith("\\"):
            continue  # "\ No newline at end of file"
        else:
            sides[Side.RIGHT].add(new_line)
            sides[Side.LEFT].add(old_line)
            new_line += 1
            old_line += 1

    return anchors


def is_anchored(anchors: dict[str, dict[Side, set[int]]], path: str, line: int, side: Side) -> bool:
    return line in anchors.get(path, {}).get(side, set())
