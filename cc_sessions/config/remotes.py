"""
Remote machine configuration.

Loaded from ~/.config/cc-sessions/remotes.toml:

    [remotes.devbox]
    host = "devbox"  # SSH config alias

    [remotes.workstation]
    host = "192.168.1.100"
    user = "ec2-user"  # Optional for raw hosts
    projects_dir = "/home/ec2-user/.claude/projects"  # Optional override

    [settings]
    cache_dir = "~/.cache/cc-sessions/remotes"
    stale_threshold = 3600  # Seconds before auto-sync

A missing file means no remotes are configured.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path

import pydantic

from cc_sessions.base_model import ConfigModel
from cc_sessions.exceptions import ConfigError

__all__ = [
    'DEFAULT_CACHE_DIR',
    'DEFAULT_REMOTE_PROJECTS_DIR',
    'DEFAULT_STALE_THRESHOLD',
    'Config',
    'RemoteConfig',
    'RemoteSettings',
    'load_config',
    'parse_config',
]

DEFAULT_CACHE_DIR = '~/.cache/cc-sessions/remotes'
DEFAULT_STALE_THRESHOLD = 3600  # 1 hour
DEFAULT_REMOTE_PROJECTS_DIR = '~/.claude/projects'


class RemoteConfig(ConfigModel):
    """Configuration for a single remote machine."""

    host: str  # SSH host (alias from ~/.ssh/config or raw hostname/IP)
    user: str | None = None  # Not needed when using an SSH config alias
    projects_dir: str | None = None  # Override for a non-standard projects directory


class RemoteSettings(ConfigModel):
    """Global settings for remote caching."""

    cache_dir: str = DEFAULT_CACHE_DIR  # May contain ~
    stale_threshold: int = pydantic.Field(default=DEFAULT_STALE_THRESHOLD, ge=0)  # Seconds


class Config(ConfigModel):
    """Top-level config file structure."""

    remotes: Mapping[str, RemoteConfig] = pydantic.Field(default_factory=dict)
    settings: RemoteSettings = pydantic.Field(default_factory=RemoteSettings)

    def source_names(self) -> list[str]:
        """All valid source filter values: 'local' then remotes in config order."""
        return ['local', *self.remotes]


def parse_config(content: str, path: Path | None = None) -> Config:
    """
    Parse TOML config text.

    Raises:
        ConfigError: If the text is not valid TOML or fails validation
    """
    source = path or Path('<string>')
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(source, str(e)) from e
    try:
        return Config.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConfigError(source, str(e)) from e


def load_config(path: Path) -> Config:
    """
    Load remote configuration from a TOML file.

    Args:
        path: Config file path (already expanded)

    Returns:
        Parsed Config, or an empty Config when the file doesn't exist

    Raises:
        ConfigError: If the file exists but cannot be read or parsed
    """
    if not path.exists():
        # No config file = no remotes configured
        return Config()

    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigError(path, str(e)) from e

    return parse_config(content, path)
