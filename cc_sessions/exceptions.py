"""
Shared exceptions for cc-sessions.

Domain-specific exceptions used across services.

Exception Hierarchy:
    CcSessionsError (base)
    ├── ProjectsRootError (no session root can be computed)
    ├── ConfigError (remote config file unreadable or invalid)
    ├── UnknownSourceError (source filter names no known source)
    ├── InvalidSearchPatternError (search pattern fails to compile)
    ├── RemoteSyncError (rsync of a remote cache failed)
    └── PickerError (interactive picker exited with an error)
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class CcSessionsError(Exception):
    """Base exception for all cc-sessions errors."""


class ProjectsRootError(CcSessionsError):
    """Raised when the sessions root directory cannot be resolved."""


class ConfigError(CcSessionsError):
    """Raised when the remote configuration file cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'Failed to load config file {path}: {reason}')


class UnknownSourceError(CcSessionsError):
    """Raised when a source filter matches neither 'local' nor a configured remote."""

    def __init__(self, source: str, known: Sequence[str]) -> None:
        self.source = source
        self.known = list(known)
        super().__init__(f"Unknown source '{source}'. Known sources: {', '.join(self.known)}")


class InvalidSearchPatternError(CcSessionsError):
    """Raised when a transcript search pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid search pattern '{pattern}': {reason}")


class RemoteSyncError(CcSessionsError):
    """Raised when refreshing a remote's local cache fails."""

    def __init__(self, remote_name: str, reason: str) -> None:
        self.remote_name = remote_name
        self.reason = reason
        super().__init__(f"rsync failed for remote '{remote_name}': {reason}")


class PickerError(CcSessionsError):
    """Raised when the interactive picker program fails instead of returning a choice."""

    def __init__(self, returncode: int, reason: str) -> None:
        self.returncode = returncode
        self.reason = reason
        super().__init__(f'Picker failed (exit status {returncode}): {reason}')
