"""review command — review a pull request and publish the result on it."""

from __future__ import annotations

import click
from github import GithubException
from rich.console import Console

from reviewbot_core.config import LANGUAGES, MODES, ConfigError, ReviewConfig, load_config
from reviewbot_core.models import Publication
from reviewbot_core.reviewer import run_review

console = Console()


@click.command("review")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to $REPO.")
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number. Defaults to $PR_NUMBER.")
@click.option("--model", default=None, help="Claude model id. Overrides config file and $MODEL.")
@click.option(
    "--mode",
    type=click.Choice(MODES),
    default=None,
    help="'agent' runs a multi-turn tool-using session, 'prompt' a single API call.",
)
@click.option("--max-turns", type=int, default=None, help="Maximum agent turns.")
@click.option("--max-diff-chars", type=int, default=None, help="Diff characters included in the prompt.")
@click.option("--language", type=click.Choice(LANGUAGES), default=None, help="Language of posted comments.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the review without posting to GitHub.",
)
@click.pass_context
def review_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    model: str | None,
    mode: str | None,
    max_turns: int | None,
    max_diff_chars: int | None,
    language: str | None,
    shadow: bool,
):
    """Review a pull request and post the result on it.

    Exits 0 whenever something was published, including an error comment
    explaining why the review could not run.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token (BOT_TOKEN is accepted as well)
      ANTHROPIC_API_KEY    Anthropic API key
    """
    config_path = (ctx.obj or {}).get("config_path", ".reviewbot.yml")
    raw = load_config(
        config_path,
        cli_overrides={
            "repo": repo,
            "pr_number": pr_number,
            "model": model,
            "mode": mode,
            "max_turns": max_turns,
            "max_diff_chars": max_diff_chars,
            "language": language,
        },
    )
    try:
        config = ReviewConfig.from_mapping(raw)
    except ConfigError as e:
        raise click.UsageError(str(e))

    try:
        outcome = run_review(config, shadow=shadow)
    except ValueError as e:
        # PR lookup failed: there is nowhere to post an error comment.
        raise click.ClickException(str(e))
    except GithubException as e:
        raise click.ClickException(f"GitHub API error {e.status}: {e.data}")

    if outcome.publication is Publication.FAILURE:
        console.print(f"[yellow]Review could not be produced: {outcome.failure.category.value}[/yellow]")
    else:
        console.print(f"[bold]Done: {outcome.publication.value}[/bold]")
