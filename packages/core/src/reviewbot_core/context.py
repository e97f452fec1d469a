"""PR context gathering: title, description, diff and follow-up instruction.

The full diff is kept alongside the clipped prompt copy because inline
comments are anchored against every changed line, including the ones the
agent never saw after truncation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reviewbot_core.gh.pull_request import get_files, get_issue_comment_bodies
from reviewbot_core.utils.code import is_code_file, is_excluded

if TYPE_CHECKING:
    from reviewbot_core.config import ReviewConfig

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n\n...(truncated)..."
NO_INSTRUCTION = "(no additional instruction)"


@dataclass
class PullRequestContext:
    title: str = ""
    body: str = ""
    diff: str = ""  # full unified diff, used to anchor inline comments
    prompt_diff: str = ""  # filtered and clipped copy sent to the agent
    instruction: str = NO_INSTRUCTION


def clip(text: str | None, max_chars: int) -> str:
    if not text:
        return ""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_diff(files, exclude=None) -> str:
    """Rebuild one unified diff from the PR's per-file patches.

    When exclude is given, files matching a pattern and non-code files are
    left out. Files without a patch (binary, too large) contribute only their
    header.
    """
    parts = []
    for f in files:
        filename = f.filename
        if exclude is not None and (is_excluded(filename, exclude) or not is_code_file(filename)):
            logger.debug("Leaving %s out of the diff", filename)
            continue
        old_name = getattr(f, "previous_filename", None) or filename
        old_path = "/dev/null" if f.status == "added" else f"a/{old_name}"
        new_path = "/dev/null" if f.status == "removed" else f"b/{filename}"
        parts.append(f"diff --git a/{old_name} b/{filename}")
        parts.append(f"--- {old_path}")
        parts.append(f"+++ {new_path}")
        if f.patch:
            parts.append(f.patch.rstrip("\n"))
    return "\n".join(parts) + "\n" if parts else ""


def extract_instruction(bodies: list[str], mention: str) -> str:
    """Return the text after the last mention of the bot in the newest comment that has one."""
    pattern = re.compile(re.escape(mention), re.IGNORECASE)
    for body in reversed(bodies):
        matches = list(pattern.finditer(body or ""))
        if not matches:
            continue
        instruction = body[matches[-1].end() :].strip()
        return instruction or NO_INSTRUCTION
    return NO_INSTRUCTION


def fetch_context(pr, config: ReviewConfig) -> PullRequestContext:
    files = list(get_files(pr))
    full_diff = build_diff(files)
    prompt_diff = build_diff(files, config.exclude)
    instruction = extract_instruction(get_issue_comment_bodies(pr), config.mention)
    if instruction != NO_INSTRUCTION:
        logger.info("Follow-up instruction found: %s", instruction[:80])
    if len(prompt_diff) > config.max_diff_chars:
        logger.info("Diff truncated from %d to %d characters", len(prompt_diff), config.max_diff_chars)

    return PullRequestContext(
        title=pr.title or "",
        body=pr.body or "",
        diff=full_diff,
        prompt_diff=clip(prompt_diff, config.max_diff_chars),
        instruction=instruction,
    )
