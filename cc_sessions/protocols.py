"""
Shared protocols for cc-sessions.

This module contains Protocol definitions used across multiple services and
the CLI. Having a single source of truth for protocols prevents type
incompatibility issues when the same protocol is defined in multiple modules.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Literal, Protocol

import attrs

# Keys the picker may return. 'abort' (ctrl-c) ends the session picker outright
PickerKey = Literal['enter', 'esc', 'ctrl-s', 'right', 'left', 'abort']


class LoggerProtocol(Protocol):
    """
    Protocol for logger - enables services to work with any logging implementation.

    Implementations:
    - CLILogger (cli/logger.py): Logs to stderr with optional verbose mode
    - NullLogger (below): No-op implementation for when logging is optional
    """

    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class NullLogger:
    """
    No-op logger implementation for when logging is optional.

    Use this when a function requires a LoggerProtocol but the caller
    doesn't need logging output.
    """

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class PickerItem(Protocol):
    """
    Per-row capability the picker needs from a record.

    Implemented once per record kind, so the picker never has to recover
    the original record from the handle it returns.
    """

    @property
    def item_id(self) -> str: ...

    def display_text(self) -> str: ...

    def preview_path(self) -> Path: ...


@attrs.define(frozen=True)
class PickerResult:
    """What the picker returned for one blocking call."""

    key: PickerKey
    query: str = ''
    selected_id: str | None = None


class Picker(Protocol):
    """
    Interactive picker boundary.

    Owns terminal rendering and fuzzy matching. Each call blocks until the
    user presses one of the accepted keys.
    """

    def pick(
        self,
        items: Sequence[PickerItem],
        *,
        header: str,
        query: str = '',
        preview_pattern: str | None = None,
    ) -> PickerResult: ...
