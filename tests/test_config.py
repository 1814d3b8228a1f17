"""
Unit tests for configuration management.
"""

import os
from pathlib import Path

import pytest
import yaml

from chat_session_client.config import (
    Config, SlackConfig, SessionConfig,
    load_config, create_default_config_file, _merge_config_data, _load_env_overrides
)
from chat_session_client.exceptions import ConfigurationError
from chat_session_client.yaml_env_loader import expand_env_vars, load_yaml_with_env


ENV_VARS = ("SLACK_API_URL", "SLACK_TIMEOUT", "SESSION_BACKEND",
            "SESSION_FAILURE_POLICY", "LOG_LEVEL", "DATA_DIR")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of config tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    """Test cases for main Config class."""

    def test_config_creation(self):
        config = Config()

        assert isinstance(config.slack, SlackConfig)
        assert isinstance(config.session, SessionConfig)
        assert config.slack.base_url == "https://slack.com/api/"
        assert config.session.credentials_key == "ChatCredentials"
        assert config.session.failure_policy == "reset"
        assert config.log_level == "INFO"
        assert not config.data_dir.startswith("~")

    def test_paths(self, temp_dir):
        config = Config(data_dir=temp_dir)

        assert config.credentials_path == Path(temp_dir) / "credentials.json"
        assert config.store_path == Path(temp_dir) / "store"

    def test_validate_defaults(self):
        Config().validate()

    def test_validate_collects_errors(self):
        config = Config(
            slack=SlackConfig(base_url="ftp://example", timeout=0),
            session=SessionConfig(backend="", failure_policy="retry"),
            log_level="LOUD"
        )

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        details = exc_info.value.details
        assert "base_url" in details
        assert "timeout" in details
        assert "backend" in details
        assert "failure_policy" in details
        assert "log_level" in details


class TestLoadConfig:

    def test_load_from_yaml(self, temp_dir):
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.dump({
                "slack": {"base_url": "https://chat.example.com/api/", "timeout": 10},
                "session": {"failure_policy": "stall", "credentials_key": "Creds"},
                "data_dir": temp_dir,
                "log_level": "debug"
            }, f)

        config = load_config(path)

        assert config.slack.base_url == "https://chat.example.com/api/"
        assert config.slack.timeout == 10
        assert config.session.failure_policy == "stall"
        assert config.session.credentials_key == "Creds"
        assert config.log_level == "DEBUG"

    def test_missing_explicit_file(self, temp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(os.path.join(temp_dir, "nope.yaml"))

    def test_invalid_yaml(self, temp_dir):
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w") as f:
            f.write("slack: [unclosed")

        with pytest.raises(ConfigurationError, match="Failed to load"):
            load_config(path)

    def test_non_mapping_yaml(self, temp_dir):
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w") as f:
            f.write("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_invalid_values_rejected(self, temp_dir):
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.dump({"session": {"failure_policy": "retry"}}, f)

        with pytest.raises(ConfigurationError, match="validation failed"):
            load_config(path)

    def test_env_expansion_in_yaml(self, temp_dir, monkeypatch):
        monkeypatch.setenv("CHAT_TEST_DATA", temp_dir)
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w") as f:
            f.write("data_dir: ${CHAT_TEST_DATA}/data\n")

        config = load_config(path)

        assert config.data_dir == f"{temp_dir}/data"

    def test_defaults_without_file(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        monkeypatch.setattr("chat_session_client.config.DEFAULT_CONFIG_PATHS", ["absent.yaml"])

        config = load_config()

        assert config.session.backend == "slack"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SLACK_API_URL", "https://override.example/api/")
        monkeypatch.setenv("SLACK_TIMEOUT", "12")
        monkeypatch.setenv("SESSION_BACKEND", "other")
        monkeypatch.setenv("SESSION_FAILURE_POLICY", "stall")
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setenv("DATA_DIR", "/tmp/chat-data")

        config = _load_env_overrides(Config())

        assert config.slack.base_url == "https://override.example/api/"
        assert config.slack.timeout == 12
        assert config.session.backend == "other"
        assert config.session.failure_policy == "stall"
        assert config.log_level == "WARNING"
        assert config.data_dir == "/tmp/chat-data"

    def test_env_override_bad_int_ignored(self, monkeypatch):
        monkeypatch.setenv("SLACK_TIMEOUT", "soon")

        config = _load_env_overrides(Config())

        assert config.slack.timeout == 30

    def test_merge_partial_sections(self):
        config = _merge_config_data(Config(), {"slack": None, "session": {"backend": "slack"}})

        assert config.slack.base_url == "https://slack.com/api/"


class TestDefaultConfigFile:

    def test_create_and_load(self, temp_dir):
        path = os.path.join(temp_dir, "nested", "config.yaml")

        create_default_config_file(path)

        with open(path) as f:
            data = yaml.safe_load(f)
        assert data["session"]["failure_policy"] == "reset"
        assert data["session"]["credentials_key"] == "ChatCredentials"

        config = load_config(path)
        assert config.slack.base_url == "https://slack.com/api/"


class TestYamlEnvLoader:

    def test_expand_nested(self, monkeypatch):
        monkeypatch.setenv("CHAT_TEST_VALUE", "x")

        result = expand_env_vars({"a": ["${CHAT_TEST_VALUE}", 1], "b": {"c": "pre-${CHAT_TEST_VALUE}"}})

        assert result == {"a": ["x", 1], "b": {"c": "pre-x"}}

    def test_unknown_variable_kept(self):
        assert expand_env_vars("${CHAT_TEST_UNSET_VARIABLE}") == "${CHAT_TEST_UNSET_VARIABLE}"

    def test_empty_file(self, temp_dir):
        path = os.path.join(temp_dir, "empty.yaml")
        Path(path).write_text("")

        assert load_yaml_with_env(path) == {}

    def test_fallback_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("CHAT_TEST_UNSET_VARIABLE", raising=False)

        assert expand_env_vars("${CHAT_TEST_UNSET_VARIABLE:-/var/lib/chat}") == "/var/lib/chat"

    def test_environment_wins_over_fallback(self, monkeypatch):
        monkeypatch.setenv("CHAT_TEST_VALUE", "from-env")

        assert expand_env_vars("${CHAT_TEST_VALUE:-fallback}") == "from-env"

    def test_unset_reference_is_logged(self, caplog):
        expand_env_vars({"data_dir": "${CHAT_TEST_UNSET_VARIABLE}"})

        assert "CHAT_TEST_UNSET_VARIABLE" in caplog.text

    def test_fallback_in_config_file(self, temp_dir, monkeypatch):
        monkeypatch.delenv("CHAT_TEST_UNSET_VARIABLE", raising=False)
        path = os.path.join(temp_dir, "config.yaml")
        Path(path).write_text(f"data_dir: ${{CHAT_TEST_UNSET_VARIABLE:-{temp_dir}/fallback}}\n")

        assert load_config(path).data_dir == f"{temp_dir}/fallback"
