from __future__ import annotations

import json
from typing import TYPE_CHECKING

from reviewbot_core.messages import get_messages

if TYPE_CHECKING:
    from reviewbot_core.config import ReviewConfig
    from reviewbot_core.context import PullRequestContext

SYSTEM_PROMPT = "You are a careful senior engineer. Be concise but actionable."

REVIEW_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "summary": {
            "type": "string",
            "description": "Overall review: summary, important issues, suggestions and test ideas.",
        },
        "comments": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "path": {"type": "string"},
                    "line": {"type": "integer", "minimum": 1},
                    "side": {"type": "string", "enum": ["RIGHT", "LEFT"]},
                    "severity": {"type": "string", "enum": ["High", "Med", "Low"]},
                    "body": {"type": "string"},
                },
                "required": ["path", "line", "body"],
            },
        },
    },
    "required": ["summary", "comments"],
}

_LANGUAGE_NAMES = {"en": "English", "ko": "Korean"}


def build_prompt(context: PullRequestContext, config: ReviewConfig) -> str:
    reply_style = config.reply_style or get_messages(config.language)["reply_style"]
    language = _LANGUAGE_NAMES.get(config.language, "English")

    prompt = f"""You are a senior code reviewer. Write a review of the PR diff below in {language}.

Output format:
{reply_style}

Rules:
- Do not speculate about anything that is not in the diff.
- Mark the severity (High/Med/Low) of every issue.
- Where possible, give alternative code or a concrete way to fix the issue.
- Finish with test suggestions.

[Additional instruction]
{context.instruction}

[PR title]
{context.title}

[PR description]
{context.body}

[PR diff]
{context.prompt_diff}
"""
    if config.structured_output:
        prompt += f"""
Return the review as a JSON object matching this schema. Put the overall review in "summary"
and attach line-specific findings to "comments" ("line" is the line number in the new file,
or in the old file with "side": "LEFT"). Only comment on lines that appear in the diff.

{json.dumps(REVIEW_SCHEMA, indent=2)}
"""
    return prompt.strip()
