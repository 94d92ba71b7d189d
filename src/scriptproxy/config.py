"""
Configuration Management
Loads settings from the environment (.env supported) and checks required keys
"""
import os
import logging
from pathlib import Path
from typing import Dict, Optional, Union
from dataclasses import dataclass

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


# Module-level settings cache
_config = None

DEFAULT_HOST = '0.0.0.0'
DEFAULT_ENV_EXAMPLE = '.env.example'

# Used when the reference .env.example cannot be read
REQUIRED_KEYS = {
    'GITHUB_REPOSITORY_URL': 'https://github.com/owner/repo',
    'GITHUB_BRANCH': 'main',
    'PORT': '4000',
}


class ConfigError(Exception):
    """Raised when a configuration value is missing or malformed"""


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, built once at startup"""
    repository_url: str
    branch: str
    port: int
    host: str = DEFAULT_HOST

    def __post_init__(self):
        object.__setattr__(self, 'repository_url', self.repository_url.rstrip('/'))

    @classmethod
    def from_env(cls) -> 'Settings':
        """Read settings from the current environment"""
        return cls(
            repository_url=get_env_string('GITHUB_REPOSITORY_URL'),
            branch=get_env_string('GITHUB_BRANCH'),
            port=get_env_number('PORT'),
            host=os.getenv('HOST') or DEFAULT_HOST,
        )


def get_env_string(key: str) -> str:
    """Get a non-empty string environment variable"""
    value = os.getenv(key)
    if not value:
        raise ConfigError(f'Config value for key "{key}" is not set')
    return value


def get_env_number(key: str) -> int:
    """Get an integer environment variable"""
    value = get_env_string(key)
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f'Config value for key "{key}" is not a number') from None


def get_config() -> Settings:
    """
    Load settings from the environment (cached).
    Priority: OS Environment > .env (loaded by the caller)
    """
    global _config
    if _config is not None:
        return _config

    _config = Settings.from_env()
    return _config


def reset_config():
    """Drop the cached settings"""
    global _config
    _config = None


def load_env_example(path: Optional[Union[str, Path]] = None) -> Dict[str, str]:
    """
    Load the reference keys file.

    Falls back to the built-in REQUIRED_KEYS table when the file is missing
    or unreadable, so the check never silently passes.
    """
    env_example_path = Path(path) if path else Path.cwd() / DEFAULT_ENV_EXAMPLE

    if not env_example_path.is_file():
        logger.error(f"Failed to load {env_example_path}: file not found")
        logger.error("Checking against the built-in list of required keys instead")
        return dict(REQUIRED_KEYS)

    try:
        values = dotenv_values(env_example_path)
    except OSError as e:
        logger.error(f"Failed to load {env_example_path}: {e}")
        logger.error("Checking against the built-in list of required keys instead")
        return dict(REQUIRED_KEYS)

    return {key: value or '' for key, value in values.items()}


def check_environment(path: Optional[Union[str, Path]] = None) -> Dict[str, str]:
    """
    Compare the reference keys against the environment

    Returns:
        {missing key: example value}, empty when everything is set
    """
    logger.info("Checking environment...")

    env_example = load_env_example(path)
    missing = {
        key: example
        for key, example in env_example.items()
        if not os.getenv(key)
    }

    logger.info("Environment checked!")
    return missing


def format_missing_keys(missing: Dict[str, str]) -> str:
    """Render missing keys as a two-column text table"""
    head = ('Missing key', 'Example')
    rows = list(missing.items())
    key_width = max([len(head[0])] + [len(k) for k, _ in rows])
    example_width = max([len(head[1])] + [len(v) for _, v in rows])

    border = f"+-{'-' * key_width}-+-{'-' * example_width}-+"
    lines = [border, f"| {head[0].ljust(key_width)} | {head[1].ljust(example_width)} |", border]
    for key, example in rows:
        lines.append(f"| {key.ljust(key_width)} | {example.ljust(example_width)} |")
    lines.append(border)
    return '\n'.join(lines)
