"""Tests for configuration loading and validation."""

import pytest

from reviewbot_core.config import ConfigError, ReviewConfig, load_config

_ENV_VARS = (
    "GITHUB_TOKEN",
    "BOT_TOKEN",
    "ANTHROPIC_API_KEY",
    "REPO",
    "PR_NUMBER",
    "MODEL",
    "MAX_DIFF_CHARS",
    "REPLY_STYLE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _valid(**overrides):
    config = load_config(config_path="nonexistent.yml")
    config.update({"repo": "owner/repo", "pr_number": 7, "github_token": "tok"})
    config.update(overrides)
    return config


class TestLoadConfig:
    def test_defaults_applied_when_no_config_file(self, tmp_path):
        config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
        assert config["model"] == "claude-sonnet-4-20250514"
        assert config["mode"] == "agent"
        assert config["max_diff_chars"] == 30000
        assert config["allowed_tools"] == []
        assert config["language"] == "en"

    def test_config_file_overrides_defaults(self, tmp_path):
        cfg = tmp_path / ".reviewbot.yml"
        cfg.write_text("mode: prompt\nmax_turns: 5\nallowed_tools:\n  - Read\n  - Grep\n")
        config = load_config(config_path=str(cfg))
        assert config["mode"] == "prompt"
        assert config["max_turns"] == 5
        assert config["allowed_tools"] == ["Read", "Grep"]

    def test_env_vars_override_config_file(self, tmp_path, monkeypatch):
        cfg = tmp_path / ".reviewbot.yml"
        cfg.write_text("model: claude-from-file\n")
        monkeypatch.setenv("MODEL", "claude-from-env")
        monkeypatch.setenv("REPO", "acme/widgets")
        monkeypatch.setenv("PR_NUMBER", "12")
        config = load_config(config_path=str(cfg))
        assert config["model"] == "claude-from-env"
        assert config["repo"] == "acme/widgets"
        assert config["pr_number"] == "12"

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("MODEL", "claude-from-env")
        config = load_config(config_path="nonexistent.yml", cli_overrides={"model": "claude-from-cli"})
        assert config["model"] == "claude-from-cli"

    def test_none_cli_overrides_ignored(self, tmp_path):
        cfg = tmp_path / ".reviewbot.yml"
        cfg.write_text("mode: prompt\n")
        config = load_config(config_path=str(cfg), cli_overrides={"mode": None})
        assert config["mode"] == "prompt"

    def test_credentials_loaded_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ant-key")
        config = load_config(config_path="nonexistent.yml")
        assert config["github_token"] == "gh-token"
        assert config["anthropic_api_key"] == "ant-key"

    def test_bot_token_used_when_github_token_missing(self, monkeypatch):
        monkeypatch.setenv("BOT_TOKEN", "bot-token")
        config = load_config(config_path="nonexistent.yml")
        assert config["github_token"] == "bot-token"

    def test_list_defaults_are_not_shared_references(self):
        config_a = load_config(config_path="nonexistent.yml")
        config_b = load_config(config_path="nonexistent.yml")
        config_a["exclude"].append("migrations/")
        config_a["allowed_tools"].append("Read")
        assert config_b["exclude"] == []
        assert config_b["allowed_tools"] == []


class TestReviewConfig:
    def test_builds_from_valid_mapping(self):
        config = ReviewConfig.from_mapping(_valid(pr_number="42", allowed_tools=["Read"]))
        assert config.pr_number == 42
        assert config.owner == "owner"
        assert config.name == "repo"
        assert config.allowed_tools == ("Read",)

    def test_missing_keys_fall_back_to_defaults(self):
        config = ReviewConfig.from_mapping({"repo": "a/b", "pr_number": 1, "github_token": "tok"})
        assert config.max_turns == 30
        assert config.mode == "agent"

    @pytest.mark.parametrize("repo", [None, "", "owner", "owner/", "/repo", "a/b/c"])
    def test_rejects_malformed_repo(self, repo):
        with pytest.raises(ConfigError, match="owner/repo"):
            ReviewConfig.from_mapping(_valid(repo=repo))

    @pytest.mark.parametrize("pr_number", [None, 0, -3, "abc", True])
    def test_rejects_invalid_pr_number(self, pr_number):
        with pytest.raises(ConfigError, match="pr_number"):
            ReviewConfig.from_mapping(_valid(pr_number=pr_number))

    def test_requires_github_token(self):
        with pytest.raises(ConfigError, match="GitHub token"):
            ReviewConfig.from_mapping(_valid(github_token=None))

    def test_rejects_unknown_mode(self):
        with pytest.raises(ConfigError, match="mode"):
            ReviewConfig.from_mapping(_valid(mode="chat"))

    def test_rejects_unknown_language(self):
        with pytest.raises(ConfigError, match="language"):
            ReviewConfig.from_mapping(_valid(language="fr"))

    def test_rejects_non_positive_diff_budget(self):
        with pytest.raises(ConfigError, match="max_diff_chars"):
            ReviewConfig.from_mapping(_valid(max_diff_chars=0))

    def test_rejects_string_as_tool_list(self):
        with pytest.raises(ConfigError, match="allowed_tools"):
            ReviewConfig.from_mapping(_valid(allowed_tools="Read"))
