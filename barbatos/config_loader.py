"""
Configuration File Loader Utility

Loads YAML or JSON configuration files and resolves secret references.

Features:
- Automatic format detection based on file extension or content
- Support for both YAML and JSON formats
- Secret reference resolution (secrets://ENV_VAR_NAME) from the environment
"""

import os
import re
import json
import yaml
from typing import Dict, Any
from pathlib import Path

from barbatos.logging_config import get_logger

logger = get_logger(__name__)

# Secret reference pattern: secrets://SECRET_NAME
SECRET_REFERENCE_PATTERN = re.compile(r'^secrets://(.+)$')


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file with automatic format detection.

    Args:
        file_path: Path to the configuration file

    Returns:
        Dict containing the loaded configuration

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file format is unsupported or content is invalid
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    file_extension = Path(file_path).suffix.lower()

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if file_extension == '.json':
                data = json.load(f)
            elif file_extension in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            else:
                content = f.read()
                try:
                    data = json.loads(content)
                except json.JSONDecodeError:
                    try:
                        data = yaml.safe_load(content)
                    except yaml.YAMLError:
                        raise ValueError(f"Unsupported configuration file format: {file_path}")
    except Exception as e:
        logger.error("config_file_load_failed", path=file_path, error=str(e))
        raise

    if data is None:
        raise ValueError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {file_path}")
    return data


def _resolve_single_secret(value: str) -> str:
    """
    Resolve a single secrets:// reference from the environment.

    Raises:
        ValueError: If the referenced variable is not set
    """
    match = SECRET_REFERENCE_PATTERN.match(value)
    if not match:
        return value

    secret_name = match.group(1)
    resolved = os.environ.get(secret_name)
    if resolved is None:
        raise ValueError(f"Secret '{secret_name}' not found in environment")
    return resolved


def resolve_secret_references(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively resolve all secrets:// references in a configuration dictionary.

    Example:
        config = {"redis": {"password": "secrets://REDIS_PASSWORD"}}
        resolved = resolve_secret_references(config)
        # {"redis": {"password": "<value of $REDIS_PASSWORD>"}}
    """
    def _resolve_value(value: Any) -> Any:
        if isinstance(value, str):
            return _resolve_single_secret(value)
        elif isinstance(value, dict):
            return {k: _resolve_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_resolve_value(item) for item in value]
        else:
            return value

    return _resolve_value(config)


def load_config_with_secrets(file_path: str) -> Dict[str, Any]:
    """Load configuration from file and resolve all secrets:// references."""
    config = load_config_file(file_path)
    return resolve_secret_references(config)
