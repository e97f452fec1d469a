from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "repo": None,
    "pr_number": None,
    "model": "claude-sonnet-4-20250514",
    "mode": "agent",  # "agent" = multi-turn tool-using session, "prompt" = single API call
    "permission_mode": "default",
    "max_turns": 30,
    "allowed_tools": [],  # empty = every tool the agent asks for is approved
    "structured_output": True,
    "max_diff_chars": 30000,
    "max_tokens": 4096,
    "reply_style": None,  # None = localized default
    "language": "en",
    "mention": "@reviewbot",
    "exclude": [],  # fnmatch patterns or directory names left out of the prompt diff
    "cwd": None,
}

MODES = ("agent", "prompt")
LANGUAGES = ("en", "ko")

# Environment variable -> config key. GITHUB_TOKEN wins over BOT_TOKEN.
_ENV_KEYS = {
    "REPO": "repo",
    "PR_NUMBER": "pr_number",
    "MODEL": "model",
    "MAX_DIFF_CHARS": "max_diff_chars",
    "REPLY_STYLE": "reply_style",
}


class ConfigError(ValueError):
    """Raised when the merged configuration cannot produce a ReviewConfig."""


def load_config(config_path: str = ".reviewbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewbot.yml in the current directory
      3. Environment variables
      4. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "allowed_tools": list(DEFAULT_CONFIG["allowed_tools"]),
        "exclude": list(DEFAULT_CONFIG["exclude"]),
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for env_name, key in _ENV_KEYS.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN") or os.environ.get("BOT_TOKEN")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")

    return config


def _positive_int(config: dict, key: str) -> int:
    value = config.get(key)
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a positive integer: got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a positive integer: got {value!r}")
    if number <= 0:
        raise ConfigError(f"{key} must be a positive integer: got {value!r}")
    return number


def _string_list(config: dict, key: str) -> tuple[str, ...]:
    value = config.get(key) or []
    if isinstance(value, str) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key} must be a list of strings: got {value!r}")
    return tuple(value)


@dataclass(frozen=True)
class ReviewConfig:
    """Validated settings for one review run.

    Built once at the process boundary and passed explicitly to every
    component, so nothing below the CLI reads the environment.
    """

    repo: str
    pr_number: int
    github_token: str
    anthropic_api_key: str | None = None
    model: str = DEFAULT_CONFIG["model"]
    mode: str = DEFAULT_CONFIG["mode"]
    permission_mode: str = DEFAULT_CONFIG["permission_mode"]
    max_turns: int = DEFAULT_CONFIG["max_turns"]
    allowed_tools: tuple[str, ...] = field(default_factory=tuple)
    structured_output: bool = True
    max_diff_chars: int = DEFAULT_CONFIG["max_diff_chars"]
    max_tokens: int = DEFAULT_CONFIG["max_tokens"]
    reply_style: str | None = None
    language: str = DEFAULT_CONFIG["language"]
    mention: str = DEFAULT_CONFIG["mention"]
    exclude: tuple[str, ...] = field(default_factory=tuple)
    cwd: str | None = None

    @property
    def owner(self) -> str:
        return self.repo.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repo.split("/", 1)[1]

    @classmethod
    def from_mapping(cls, config: dict) -> ReviewConfig:
        config = {**DEFAULT_CONFIG, **config}
        repo = config.get("repo") or ""
        owner, _, name = str(repo).partition("/")
        if not owner or not name or "/" in name:
            raise ConfigError(f'repo must be "owner/repo": got {repo!r}')

        if not config.get("github_token"):
            raise ConfigError("No GitHub token found. Set GITHUB_TOKEN (or BOT_TOKEN).")

        mode = config.get("mode", DEFAULT_CONFIG["mode"])
        if mode not in MODES:
            raise ConfigError(f"mode must be one of {', '.join(MODES)}: got {mode!r}")

        language = config.get("language", DEFAULT_CONFIG["language"])
        if language not in LANGUAGES:
            raise ConfigError(f"language must be one of {', '.join(LANGUAGES)}: got {language!r}")

        mention = config.get("mention") or DEFAULT_CONFIG["mention"]

        return cls(
            repo=str(repo),
            pr_number=_positive_int(config, "pr_number"),
            github_token=config["github_token"],
            anthropic_api_key=config.get("anthropic_api_key"),
            model=config.get("model") or DEFAULT_CONFIG["model"],
            mode=mode,
            permission_mode=config.get("permission_mode") or DEFAULT_CONFIG["permission_mode"],
            max_turns=_positive_int(config, "max_turns"),
            allowed_tools=_string_list(config, "allowed_tools"),
            structured_output=bool(config.get("structured_output", True)),
            max_diff_chars=_positive_int(config, "max_diff_chars"),
            max_tokens=_positive_int(config, "max_tokens"),
            reply_style=config.get("reply_style"),
            language=language,
            mention=str(mention),
            exclude=_string_list(config, "exclude"),
            cwd=config.get("cwd"),
        )
