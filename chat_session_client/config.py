"""
Configuration management for the Chat Session Client.

This module handles loading, validation, and management of application
configuration from YAML files and environment variables.
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from pathlib import Path
from urllib.parse import urlparse

from .exceptions import ConfigurationError
from .yaml_env_loader import load_yaml_with_env


DEFAULT_CREDENTIALS_KEY = "ChatCredentials"

VALID_FAILURE_POLICIES = ("reset", "stall")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG_PATHS = [
    "chat-session-client.yaml",
    "~/.chat-session-client/config.yaml",
    "/etc/chat-session-client/config.yaml"
]


@dataclass
class SlackConfig:
    """Slack Web API configuration."""
    base_url: str = "https://slack.com/api/"
    timeout: int = 30  # seconds per API call


@dataclass
class SessionConfig:
    """Session lifecycle configuration."""
    backend: str = "slack"
    credentials_key: str = DEFAULT_CREDENTIALS_KEY
    failure_policy: str = "reset"  # "reset" or "stall"


@dataclass
class Config:
    """Main application configuration."""
    slack: SlackConfig = field(default_factory=SlackConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    data_dir: str = "~/.chat-session-client"
    credentials_file: str = "credentials.json"
    store_dir: str = "store"
    log_level: str = "INFO"

    def __post_init__(self):
        """Post-initialization to expand paths."""
        self.data_dir = os.path.expanduser(self.data_dir)

    @property
    def credentials_path(self) -> Path:
        """Path of the JSON file holding persisted credentials."""
        return Path(self.data_dir) / self.credentials_file

    @property
    def store_path(self) -> Path:
        """Root directory of per-user session stores."""
        return Path(self.data_dir) / self.store_dir

    def validate(self) -> None:
        """Validate configuration and raise ConfigurationError if invalid."""
        errors = []

        # Validate Slack configuration
        if not self.slack.base_url:
            errors.append("Slack base_url is required")
        else:
            parsed = urlparse(self.slack.base_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"Slack base_url must be an http(s) URL: {self.slack.base_url}")

        if not isinstance(self.slack.timeout, int) or self.slack.timeout <= 0:
            errors.append("Slack timeout must be a positive integer")

        # Validate session configuration
        if not self.session.backend:
            errors.append("Session backend is required")

        if not self.session.credentials_key:
            errors.append("Session credentials_key is required")

        if self.session.failure_policy not in VALID_FAILURE_POLICIES:
            errors.append(f"failure_policy must be one of: {', '.join(VALID_FAILURE_POLICIES)}")

        # Validate storage layout
        if not self.data_dir:
            errors.append("data_dir is required")
        if not self.credentials_file:
            errors.append("credentials_file is required")
        if not self.store_dir:
            errors.append("store_dir is required")

        # Validate log level
        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        if errors:
            raise ConfigurationError("Configuration validation failed", "; ".join(errors))


def find_config_file() -> Optional[str]:
    """Return the first existing configuration file from the default locations."""
    for path in DEFAULT_CONFIG_PATHS:
        expanded_path = os.path.expanduser(path)
        if os.path.exists(expanded_path):
            return expanded_path
    return None


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to configuration file. If None, uses default locations.

    Returns:
        Config: Loaded and validated configuration.

    Raises:
        ConfigurationError: If configuration cannot be loaded or is invalid.
    """
    config = Config()

    if config_path is None:
        config_path = find_config_file()
    elif not os.path.exists(config_path):
        raise ConfigurationError(f"Config file not found: {config_path}")

    if config_path:
        try:
            yaml_data = load_yaml_with_env(config_path)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config file {config_path}", str(e))

        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        config = _merge_config_data(config, yaml_data)

    config = _load_env_overrides(config)

    config.validate()

    return config


def _merge_config_data(config: Config, data: Dict[str, Any]) -> Config:
    """Merge YAML data into configuration object."""

    if 'slack' in data:
        slack_data = data['slack'] or {}
        if 'base_url' in slack_data:
            config.slack.base_url = slack_data['base_url']
        if 'timeout' in slack_data:
            config.slack.timeout = slack_data['timeout']

    if 'session' in data:
        session_data = data['session'] or {}
        if 'backend' in session_data:
            config.session.backend = session_data['backend']
        if 'credentials_key' in session_data:
            config.session.credentials_key = session_data['credentials_key']
        if 'failure_policy' in session_data:
            config.session.failure_policy = session_data['failure_policy']

    if 'data_dir' in data:
        config.data_dir = os.path.expanduser(data['data_dir'])
    if 'credentials_file' in data:
        config.credentials_file = data['credentials_file']
    if 'store_dir' in data:
        config.store_dir = data['store_dir']
    if 'log_level' in data:
        config.log_level = str(data['log_level']).upper()

    return config


def _load_env_overrides(config: Config) -> Config:
    """Load configuration overrides from environment variables."""

    slack_api_url = os.getenv('SLACK_API_URL')
    if slack_api_url:
        config.slack.base_url = slack_api_url

    slack_timeout = os.getenv('SLACK_TIMEOUT')
    if slack_timeout:
        try:
            config.slack.timeout = int(slack_timeout)
        except ValueError:
            pass

    session_backend = os.getenv('SESSION_BACKEND')
    if session_backend:
        config.session.backend = session_backend

    failure_policy = os.getenv('SESSION_FAILURE_POLICY')
    if failure_policy:
        config.session.failure_policy = failure_policy

    log_level = os.getenv('LOG_LEVEL')
    if log_level:
        config.log_level = log_level.upper()

    data_dir = os.getenv('DATA_DIR')
    if data_dir:
        config.data_dir = os.path.expanduser(data_dir)

    return config


def create_default_config_file(path: str) -> None:
    """Create a default configuration file at the specified path."""

    default_config = {
        'slack': {
            'base_url': 'https://slack.com/api/',
            'timeout': 30
        },
        'session': {
            'backend': 'slack',
            'credentials_key': DEFAULT_CREDENTIALS_KEY,
            'failure_policy': 'reset'  # Options: reset, stall
        },
        'data_dir': '~/.chat-session-client',
        'credentials_file': 'credentials.json',
        'store_dir': 'store',
        'log_level': 'INFO'
    }

    # Ensure directory exists
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(default_config, f, default_flow_style=False, indent=2)
