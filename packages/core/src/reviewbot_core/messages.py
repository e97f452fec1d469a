"""User-facing comment templates, keyed by language code."""

from __future__ import annotations

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "reply_style": "Summary / Important issues / Suggestions / Test ideas",
        "placeholder": "No review could be generated. (empty response)",
        "outside_diff": "Comments on lines outside the diff",
        "credit_exhausted": (
            "⚠️ The review bot could not call the Anthropic API: **credit balance too low**\n\n"
            "- Message: {message}\n"
            "{request_id}"
            "\n👉 Top up credits or set up billing under Plans & Billing in the Anthropic Console."
        ),
        "model_not_found": (
            "⚠️ The review bot could not call the Anthropic API: **model not found**\n\n"
            "- Requested model: `{model}`\n"
            "- Message: {message}\n"
            "{request_id}"
            "{models}"
            "\n👉 Change the `model` setting to one of the models available to this key."
        ),
        "available_models": "\n✅ Models visible to this key:\n{items}\n",
        "generic": (
            "⚠️ The review bot hit an error while running.\n\n"
            "- Message: {message}\n"
            "{request_id}"
            "\n(See the CI job log for details.)"
        ),
        "request_id": "- request_id: {request_id}\n",
    },
    "ko": {
        "reply_style": "요약 / 중요한 이슈 / 개선 제안 / 테스트 제안",
        "placeholder": "리뷰 결과를 생성하지 못했습니다. (빈 응답)",
        "outside_diff": "diff 범위 밖 라인에 대한 코멘트",
        "credit_exhausted": (
            "⚠️ 리뷰봇이 Anthropic API를 호출하지 못했습니다: **크레딧 부족**\n\n"
            "- 메시지: {message}\n"
            "{request_id}"
            "\n👉 Anthropic Console의 Plans & Billing에서 크레딧을 충전/결제 설정해주세요."
        ),
        "model_not_found": (
            "⚠️ 리뷰봇이 Anthropic API를 호출하지 못했습니다: **모델을 찾을 수 없음**\n\n"
            "- 요청 모델: `{model}`\n"
            "- 메시지: {message}\n"
            "{request_id}"
            "{models}"
            "\n👉 `model` 설정 값을 이 키에서 사용 가능한 모델로 바꿔주세요."
        ),
        "available_models": "\n✅ 이 키에서 보이는 모델 예시:\n{items}\n",
        "generic": (
            "⚠️ 리뷰봇 실행 중 오류가 발생했습니다.\n\n"
            "- 메시지: {message}\n"
            "{request_id}"
            "\n(상세 로그는 CI 실행 로그를 확인해주세요.)"
        ),
        "request_id": "- request_id: {request_id}\n",
    },
}


def get_messages(language: str) -> dict[str, str]:
    return MESSAGES.get(language, MESSAGES["en"])
