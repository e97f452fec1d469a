"""Failure classification and the failure comment posted on the PR.

A failed review run is reported on the PR, never as a failed CI job.
Classification is plain substring matching on the error text, which is all
the Anthropic API and the agent CLI give us to tell the cases apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from reviewbot_core.messages import get_messages

_CREDIT_MARKER = "credit balance is too low"


class FailureCategory(str, Enum):
    CREDIT_EXHAUSTED = "credit_exhausted"
    MODEL_NOT_FOUND = "model_not_found"
    GENERIC = "generic"


@dataclass(frozen=True)
class Failure:
    category: FailureCategory
    message: str
    request_id: str | None = None


def _body(err: BaseException) -> dict:
    body = getattr(err, "body", None)
    return body if isinstance(body, dict) else {}


def error_message(err: BaseException) -> str:
    """The API's own error message when it sent one, else the exception text."""
    inner = _body(err).get("error")
    if isinstance(inner, dict) and inner.get("message"):
        return str(inner["message"])
    return str(err) or "Unknown error"


def request_id(err: BaseException) -> str | None:
    value = getattr(err, "request_id", None) or _body(err).get("request_id")
    return str(value) if value else None


def classify(err: BaseException) -> Failure:
    message = error_message(err)
    reported = f"{message}\n{err}".lower()

    if _CREDIT_MARKER in reported:
        category = FailureCategory.CREDIT_EXHAUSTED
    elif "model:" in reported and "not_found" in reported:
        category = FailureCategory.MODEL_NOT_FOUND
    else:
        category = FailureCategory.GENERIC
    return Failure(category=category, message=message, request_id=request_id(err))


def render_failure(
    failure: Failure,
    language: str = "en",
    model: str = "",
    available_models: list[str] | None = None,
) -> str:
    messages = get_messages(language)
    rid = messages["request_id"].format(request_id=failure.request_id) if failure.request_id else ""

    if failure.category is FailureCategory.CREDIT_EXHAUSTED:
        return messages["credit_exhausted"].format(message=failure.message, request_id=rid)

    if failure.category is FailureCategory.MODEL_NOT_FOUND:
        models = ""
        if available_models:
            items = "\n".join(f"- `{m}`" for m in available_models)
            models = messages["available_models"].format(items=items)
        return messages["model_not_found"].format(model=model, message=failure.message, request_id=rid, models=models)

    return messages["generic"].format(message=failure.message, request_id=rid)
