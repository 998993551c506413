"""
Application configuration for cc-sessions.

Environment-driven settings (CC_SESSIONS_*) and helper functions. Each command
builds settings once at the CLI edge and threads them explicitly through
service calls; there is no module-level singleton.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import pydantic
import pydantic_settings

T = TypeVar('T', bound='AppSettings')

DEFAULT_CONFIG_FILE = '~/.config/cc-sessions/remotes.toml'


class AppSettings(pydantic_settings.BaseSettings):
    """Settings shared by every cc-sessions command."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='CC_SESSIONS_',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',  # Env files may carry unrelated variables
        frozen=True,
    )

    # Application metadata
    APP_NAME: str = 'cc-sessions'
    VERSION: str = '0.1.0'

    # Local sessions root; None means ~/.claude/projects
    PROJECTS_DIR: str | None = None

    # Remote machines table (TOML)
    CONFIG_FILE: str = DEFAULT_CONFIG_FILE

    # Thread pool size for per-file work; None uses the executor default
    MAX_WORKERS: int | None = None

    @pydantic.field_validator('MAX_WORKERS')
    @classmethod
    def validate_max_workers(cls, v: int | None) -> int | None:
        """Validate the worker count is positive."""
        if v is not None and v < 1:
            raise ValueError('MAX_WORKERS must be at least 1')
        return v


def get_settings(settings_class: type[T] = AppSettings, env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()  # No .env file, load from environment only

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)

