"""
Configuration file loading with environment references.

String values may reference the environment as ``${NAME}`` or, with a
fallback, ``${NAME:-fallback}``. A reference to an unset variable without
a fallback is left as written so that validation can report it.
"""

import logging
import os
import re
from typing import Any, Dict

import yaml


_ENV_REFERENCE = re.compile(r'\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}')

logger = logging.getLogger(__name__)


def _resolve(match: "re.Match[str]") -> str:
    name = match.group('name')
    value = os.environ.get(name)
    if value:
        return value

    fallback = match.group('fallback')
    if fallback is not None:
        return fallback

    logger.warning(f"Configuration references unset environment variable {name}")
    return match.group(0)


def expand_env_vars(value: Any) -> Any:
    """Resolve environment references in every string of a loaded document."""
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(_resolve, value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def load_yaml_with_env(file_path) -> Dict[str, Any]:
    """
    Read a YAML configuration file and resolve its environment references.

    An empty file yields an empty mapping.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        document = yaml.safe_load(f)

    if document is None:
        return {}
    return expand_env_vars(document)
