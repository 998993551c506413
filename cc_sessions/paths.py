"""
Path utilities for Claude Code session storage.

Claude Code stores one transcript per session:

    ~/.claude/projects/
      -Users-you-project-a/
        abc12345-1234-1234-1234-123456789abc.jsonl   # Session transcript (UUID filename)
      -Users-you-project-b/
        ghi78901-9012-9012-9012-901234567890.jsonl

Only files exactly two levels below the root are sessions. Anything else
(agent transcripts, subagents/ trees, sessions-index.json) is invisible to
discovery.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from cc_sessions.exceptions import ProjectsRootError

__all__ = [
    'EXCLUDED_SEGMENT',
    'SESSION_EXTENSION',
    'expand_path',
    'is_session_file',
    'is_valid_session_uuid',
    'iter_session_files',
    'resolve_projects_dir',
]

SESSION_EXTENSION = '.jsonl'
EXCLUDED_SEGMENT = 'subagents'

_UUID_SEGMENT_LENGTHS = (8, 4, 4, 4, 12)
_UUID_CHARS = frozenset('0123456789abcdefABCDEF-')


def is_valid_session_uuid(stem: str) -> bool:
    """
    Check if a string has canonical UUID shape (8-4-4-4-12, hex and dashes).

    Examples:
        >>> is_valid_session_uuid('12345678-1234-1234-1234-123456789abc')
        True
        >>> is_valid_session_uuid('sessions-index')
        False
    """
    parts = stem.split('-')
    if tuple(len(part) for part in parts) != _UUID_SEGMENT_LENGTHS:
        return False
    return all(char in _UUID_CHARS for char in stem)


def is_session_file(path: Path) -> bool:
    """Whether a path qualifies as a session transcript."""
    if path.suffix != SESSION_EXTENSION:
        return False
    if EXCLUDED_SEGMENT in path.parts:
        return False
    return is_valid_session_uuid(path.stem)


def iter_session_files(root: Path) -> Iterator[Path]:
    """
    Yield session files exactly two levels below root (root/<project-dir>/<file>).

    Unreadable project directories and entries are skipped. An unreadable
    root raises: that is a source-level failure the caller must see.

    Raises:
        OSError: If root itself cannot be listed
    """
    for project_dir in sorted(root.iterdir()):
        try:
            if not project_dir.is_dir():
                continue
            entries = sorted(project_dir.iterdir())
        except OSError:
            continue
        for entry in entries:
            try:
                is_file = entry.is_file()
            except OSError:
                continue
            if is_file and is_session_file(entry):
                yield entry


def expand_path(path: str | Path) -> Path:
    """Expand a leading ~ to the home directory."""
    return Path(os.path.expanduser(str(path)))


def resolve_projects_dir(override: str | Path | None = None) -> Path:
    """
    Resolve the local sessions root.

    Args:
        override: Explicit root (may use ~); defaults to ~/.claude/projects

    Returns:
        Absolute sessions root path

    Raises:
        ProjectsRootError: If the home directory cannot be determined
    """
    try:
        if override is not None:
            return expand_path(override).resolve()
        return Path.home() / '.claude' / 'projects'
    except RuntimeError as e:
        raise ProjectsRootError(f'Could not find home directory: {e}') from e
