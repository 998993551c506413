"""Configuration for cc-sessions: environment settings and the remotes table."""

from __future__ import annotations

from cc_sessions.config.base import AppSettings, get_settings
from cc_sessions.config.remotes import Config, RemoteConfig, RemoteSettings, load_config, parse_config

__all__ = [
    'AppSettings',
    'Config',
    'RemoteConfig',
    'RemoteSettings',
    'get_settings',
    'load_config',
    'parse_config',
]
