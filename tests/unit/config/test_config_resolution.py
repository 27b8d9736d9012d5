"""Configuration resolution: precedence, origins, profiles and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from webhook_chat.config import (
    DEFAULT_ERROR_MESSAGE,
    ConfigFileError,
    effective_config,
    print_effective_config,
    resolve_config,
)
from webhook_chat.core.exceptions import ConfigurationError

pytestmark = pytest.mark.unit


def write_pyproject(root: Path, body: str) -> Path:
    path = root / "pyproject.toml"
    path.write_text(body, encoding="utf-8")
    return path


class TestDefaults:
    def test_defaults_without_any_source(self, tmp_path):
        config = resolve_config(project_root=tmp_path)

        assert config.webhook_url is None
        assert config.timeout_seconds is None
        assert config.message_field == "chatInput"
        assert config.history_field == "chatHistory"
        assert config.error_message == DEFAULT_ERROR_MESSAGE
        assert set(config.origin.values()) == {"default"}


class TestPrecedence:
    def test_project_file_overrides_defaults(self, tmp_path):
        write_pyproject(
            tmp_path,
            '[tool.webhook_chat]\nwebhook_url = "https://file.example/chat"\n',
        )
        config = resolve_config(project_root=tmp_path)

        assert config.webhook_url == "https://file.example/chat"
        assert config.origin["webhook_url"] == "file"
        assert config.origin["message_field"] == "default"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        write_pyproject(
            tmp_path,
            '[tool.webhook_chat]\nwebhook_url = "https://file.example/chat"\n',
        )
        monkeypatch.setenv("WEBHOOK_CHAT_WEBHOOK_URL", "https://env.example/chat")
        monkeypatch.setenv("WEBHOOK_CHAT_TIMEOUT_SECONDS", "30")

        config = resolve_config(project_root=tmp_path)

        assert config.webhook_url == "https://env.example/chat"
        assert config.timeout_seconds == 30.0
        assert config.origin["webhook_url"] == "env"
        assert config.origin["timeout_seconds"] == "env"

    def test_programmatic_overrides_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WEBHOOK_CHAT_WEBHOOK_URL", "https://env.example/chat")

        config = resolve_config(
            {"webhook_url": "https://code.example/chat", "unknown": 1},
            project_root=tmp_path,
        )

        assert config.webhook_url == "https://code.example/chat"
        assert config.origin["webhook_url"] == "programmatic"
        assert "unknown" not in config.origin

    def test_home_file_is_lowest_file_source(self, tmp_path, monkeypatch):
        home = tmp_path / "home.toml"
        home.write_text(
            'webhook_url = "https://home.example/chat"\nmessage_field = "input"\n',
            encoding="utf-8",
        )
        monkeypatch.setenv("WEBHOOK_CHAT_CONFIG_HOME", str(home))
        project = tmp_path / "project"
        project.mkdir()
        write_pyproject(
            project,
            '[tool.webhook_chat]\nwebhook_url = "https://project.example/chat"\n',
        )

        config = resolve_config(project_root=project)

        assert config.webhook_url == "https://project.example/chat"
        assert config.message_field == "input"
        assert config.origin["message_field"] == "file"

    def test_env_file_is_loaded(self, tmp_path, monkeypatch):
        # Undo the autouse stub so python-dotenv really runs
        from dotenv import load_dotenv

        monkeypatch.setattr("webhook_chat.config.env_loader.load_dotenv", load_dotenv)
        # Register the variable with monkeypatch so teardown removes what dotenv sets
        monkeypatch.setenv("WEBHOOK_CHAT_HISTORY_FIELD", "placeholder")
        monkeypatch.delenv("WEBHOOK_CHAT_HISTORY_FIELD")
        env_file = tmp_path / ".env"
        env_file.write_text("WEBHOOK_CHAT_HISTORY_FIELD=past\n", encoding="utf-8")

        config = resolve_config(project_root=tmp_path, use_env_file=env_file)

        assert config.history_field == "past"
        assert config.origin["history_field"] == "env"


class TestProfiles:
    PYPROJECT = (
        "[tool.webhook_chat]\n"
        'webhook_url = "https://base.example/chat"\n'
        "[tool.webhook_chat.profiles.staging]\n"
        'webhook_url = "https://staging.example/chat"\n'
        "timeout_seconds = 5\n"
    )

    def test_profile_selects_profile_table(self, tmp_path):
        write_pyproject(tmp_path, self.PYPROJECT)

        config = resolve_config(project_root=tmp_path, profile="staging")

        assert config.webhook_url == "https://staging.example/chat"
        assert config.timeout_seconds == 5

    def test_profile_from_environment(self, tmp_path, monkeypatch):
        write_pyproject(tmp_path, self.PYPROJECT)
        monkeypatch.setenv("WEBHOOK_CHAT_PROFILE", "staging")

        assert resolve_config(project_root=tmp_path).timeout_seconds == 5

    def test_missing_profile_is_tolerated(self, tmp_path):
        write_pyproject(tmp_path, self.PYPROJECT)

        config = resolve_config(project_root=tmp_path, profile="nope")

        assert config.webhook_url is None


class TestErrors:
    def test_malformed_project_file_raises(self, tmp_path):
        write_pyproject(tmp_path, "[tool.webhook_chat\nbroken")

        with pytest.raises(ConfigFileError):
            resolve_config(project_root=tmp_path)

    def test_malformed_home_file_is_skipped(self, tmp_path, monkeypatch):
        home = tmp_path / "home.toml"
        home.write_text("not = [valid", encoding="utf-8")
        monkeypatch.setenv("WEBHOOK_CHAT_CONFIG_HOME", str(home))

        assert resolve_config(project_root=tmp_path).webhook_url is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"webhook_url": "ftp://example.com"},
            {"timeout_seconds": 0},
            {"timeout_seconds": -1},
            {"message_field": ""},
        ],
    )
    def test_invalid_values_raise_configuration_error(self, tmp_path, overrides):
        with pytest.raises(ConfigurationError, match="validation failed"):
            resolve_config(overrides, project_root=tmp_path)

    def test_invalid_env_value_names_the_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WEBHOOK_CHAT_TIMEOUT_SECONDS", "soon")

        with pytest.raises(ConfigurationError, match="WEBHOOK_CHAT_TIMEOUT_SECONDS"):
            resolve_config(project_root=tmp_path)

    def test_missing_env_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_config(project_root=tmp_path, use_env_file=tmp_path / "missing.env")

    def test_blank_values_mean_unset(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WEBHOOK_CHAT_WEBHOOK_URL", "  ")
        monkeypatch.setenv("WEBHOOK_CHAT_TIMEOUT_SECONDS", "none")

        config = resolve_config(project_root=tmp_path)

        assert config.webhook_url is None
        assert config.timeout_seconds is None


class TestResolvedConfigHelpers:
    def test_effective_config_view(self, tmp_path):
        config = resolve_config(
            {"webhook_url": "https://x.example/chat"}, project_root=tmp_path
        )

        view = effective_config(config)

        assert view["webhook_url"] == {
            "value": "https://x.example/chat",
            "origin": "programmatic",
        }
        assert view["history_field"]["origin"] == "default"

    def test_print_effective_config_json(self, tmp_path, capsys):
        import json

        config = resolve_config(project_root=tmp_path)
        print_effective_config(config, as_json=True)

        data = json.loads(capsys.readouterr().out)
        assert data["message_field"]["value"] == "chatInput"
