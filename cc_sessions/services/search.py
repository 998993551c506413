"""
Transcript search.

Two parallel passes over one root:
1. Membership: each file is scanned line by line until the first match
2. Materialization: only matching files are built into Sessions

Invalid pattern syntax is raised immediately - there is no meaningful
partial result to fall back to.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from cc_sessions.exceptions import InvalidSearchPatternError
from cc_sessions.paths import iter_session_files
from cc_sessions.schemas.operations.discovery import Session, SessionSource
from cc_sessions.services.builder import build_session

__all__ = [
    'compile_search_pattern',
    'file_matches',
    'search_sessions',
]


def compile_search_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile a search pattern once for reuse across files.

    Raises:
        InvalidSearchPatternError: If the pattern is not a valid regex
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidSearchPatternError(pattern, str(e)) from e


def file_matches(path: Path, regex: re.Pattern[str]) -> bool:
    """Whether any line of the file matches; stops at the first match."""
    try:
        with open(path, encoding='utf-8', errors='replace') as f:
            return any(regex.search(line) for line in f)
    except OSError:
        return False


def search_sessions(
    root: Path,
    regex: re.Pattern[str],
    source: SessionSource | None = None,
    max_workers: int | None = None,
) -> list[Session]:
    """
    Search session transcripts under root for a pattern.

    Args:
        root: Projects root (local, or a remote's cache directory)
        regex: Compiled pattern from compile_search_pattern()
        source: Source tag for the materialized sessions
        max_workers: Thread pool size (None = executor default)

    Returns:
        Matching sessions, newest first

    Raises:
        OSError: If root itself cannot be listed
    """
    candidates = list(iter_session_files(root))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        matched = [
            path
            for path, hit in zip(candidates, executor.map(lambda p: file_matches(p, regex), candidates))
            if hit
        ]
        built = executor.map(lambda p: build_session(p, p.parent.name, source), matched)
        sessions = [session for session in built if session is not None]

    sessions.sort(key=lambda s: s.modified, reverse=True)
    return sessions
