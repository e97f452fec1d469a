"""Core PR review orchestration."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console

from reviewbot_core.config import ReviewConfig
from reviewbot_core.context import fetch_context
from reviewbot_core.failures import FailureCategory, classify, render_failure
from reviewbot_core.gh.pull_request import get_pull, get_repo, post_comment
from reviewbot_core.models import Publication, ReviewOutcome
from reviewbot_core.normalize import normalize
from reviewbot_core.prompt import REVIEW_SCHEMA, build_prompt
from reviewbot_core.providers.anthropic import AnthropicAgent, list_model_ids
from reviewbot_core.providers.claude_agent import ClaudeAgent
from reviewbot_core.providers.permissions import AllowAllPolicy
from reviewbot_core.publisher import print_shadow_review, publish
from reviewbot_core.session import run_session

console = Console()
logger = logging.getLogger(__name__)


def _get_agent(config: ReviewConfig):
    schema = REVIEW_SCHEMA if config.structured_output else None
    if config.mode == "agent":
        return ClaudeAgent(
            model=config.model,
            api_key=config.anthropic_api_key,
            permission_mode=config.permission_mode,
            max_turns=config.max_turns,
            allowed_tools=config.allowed_tools,
            cwd=config.cwd,
            output_schema=schema,
            policy=AllowAllPolicy(config.allowed_tools),
        )
    if config.mode == "prompt":
        return AnthropicAgent(
            model=config.model,
            api_key=config.anthropic_api_key,
            max_tokens=config.max_tokens,
            output_schema=schema,
        )
    raise ValueError(f"Unknown review mode: {config.mode!r}. Choose 'agent' or 'prompt'.")


def report_failure(pr, err: Exception, config: ReviewConfig, shadow: bool = False) -> ReviewOutcome:
    """Classify err and post it on the PR as one comment."""
    failure = classify(err)
    logger.error("Review failed (%s): %s", failure.category.value, failure.message)

    available = None
    if failure.category is FailureCategory.MODEL_NOT_FOUND:
        available = list_model_ids(config.anthropic_api_key)
    body = render_failure(failure, config.language, config.model, available)

    if shadow:
        console.print(body, markup=False)
    else:
        post_comment(pr, body)
        console.print(f"[yellow]Review failed ({failure.category.value}). Posted error comment.[/yellow]")
    return ReviewOutcome(publication=Publication.FAILURE, failure=failure)


def run_review(config: ReviewConfig, repo_obj=None, agent=None, shadow: bool = False) -> ReviewOutcome:
    """Run the full review pipeline for one PR.

    Every failure after the PR is resolved ends as a classified comment on the
    PR and a FAILURE outcome. Only errors that leave nothing to comment on
    (repo or PR lookup, posting the failure comment itself) propagate.
    """
    this_repo = repo_obj if repo_obj is not None else get_repo(config.repo, token=config.github_token)
    this_pr = get_pull(this_repo, config.pr_number)

    try:
        console.print(f"Reviewing {config.repo}#{config.pr_number} with {config.model} ({config.mode} mode)")
        context = fetch_context(this_pr, config)
        prompt = build_prompt(context, config)

        session = asyncio.run(run_session(agent if agent is not None else _get_agent(config), prompt))
        review = normalize(session.structured, session.text)

        if shadow:
            print_shadow_review(review)
            return ReviewOutcome(publication=Publication.SHADOW, review=review)

        publication = publish(this_pr, review, context.diff, config.language)
        return ReviewOutcome(publication=publication, review=review)
    except Exception as e:
        logger.debug("Review pipeline error", exc_info=True)
        return report_failure(this_pr, e, config, shadow=shadow)
