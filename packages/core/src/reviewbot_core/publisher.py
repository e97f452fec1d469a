"""Publish a Review to the PR with exactly one write.

    None                 → placeholder comment
    comments present     → one inline review (summary as its body)
    summary only         → one plain comment

Comments whose line is not part of the diff would make GitHub reject the
whole review, so they are listed in the review body instead of attached
inline. When none of them can be attached, everything goes into one plain
comment.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from reviewbot_core.gh.pull_request import create_review, post_comment
from reviewbot_core.messages import get_messages
from reviewbot_core.models import Publication, Review, ReviewComment
from reviewbot_core.utils.diff import diff_anchors, is_anchored

console = Console()
logger = logging.getLogger(__name__)


def split_anchored(
    comments: tuple[ReviewComment, ...], diff: str
) -> tuple[list[ReviewComment], list[ReviewComment]]:
    """Partition comments into (anchored in the diff, outside the diff)."""
    anchors = diff_anchors(diff)
    anchored, outside = [], []
    for comment in comments:
        if is_anchored(anchors, comment.path, comment.line, comment.side):
            anchored.append(comment)
        else:
            outside.append(comment)
    return anchored, outside


def _outside_section(comments: list[ReviewComment], language: str) -> str:
    if not comments:
        return ""
    heading = get_messages(language)["outside_diff"]
    lines = [f"### {heading}", ""]
    for c in comments:
        suffix = " (old)" if c.side.value == "LEFT" else ""
        lines.append(f"- `{c.path}:{c.line}`{suffix} {c.decorated_body()}")
    return "\n".join(lines)


def _join(*parts: str) -> str:
    return "\n\n".join(part for part in parts if part)


def publish(pr, review: Review | None, diff: str, language: str = "en") -> Publication:
    if review is None:
        post_comment(pr, get_messages(language)["placeholder"])
        console.print("[yellow]No review produced. Posted placeholder comment.[/yellow]")
        return Publication.PLACEHOLDER

    if review.comments:
        anchored, outside = split_anchored(review.comments, diff)
        if outside:
            logger.info("%d comment(s) reference lines outside the diff", len(outside))
        body = _join(review.summary, _outside_section(outside, language))

        if anchored:
            api_comments = [
                {"path": c.path, "line": c.line, "side": c.side.value, "body": c.decorated_body()} for c in anchored
            ]
            create_review(pr, body, api_comments)
            console.print(f"[green]Review posted with {len(anchored)} inline comment(s).[/green]")
            return Publication.REVIEW

        post_comment(pr, body)
        console.print("[green]Review posted as a single comment (no comment could be placed inline).[/green]")
        return Publication.COMMENT

    post_comment(pr, review.summary)
    console.print("[green]Review posted as a single comment.[/green]")
    return Publication.COMMENT


def print_shadow_review(review: Review | None) -> None:
    """Print a review to the terminal without posting to GitHub."""
    if review is None:
        console.print("[yellow]Shadow mode: no review generated.[/yellow]")
        return
    console.print(f"\n[bold]Shadow review — {len(review.comments)} inline comment(s) (not posted)[/bold]\n")
    if review.summary:
        console.print(review.summary, markup=False)
        console.print()
    for c in review.comments:
        console.print(f"[bold cyan]{escape(c.path)}[/bold cyan]  line [bold]{c.line}[/bold] ({c.side.value})")
        console.print(f"  {c.decorated_body()}", markup=False)
        console.print()
