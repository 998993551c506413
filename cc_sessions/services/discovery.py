"""
Session discovery service - finds sessions across the local root and remote caches.

Provides the per-root locator (parallel build of every candidate file) and the
multi-source aggregator that merges local output with each configured
remote's cached output. A failing source is recorded, never raised.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from cc_sessions.config.remotes import Config
from cc_sessions.exceptions import UnknownSourceError
from cc_sessions.paths import iter_session_files
from cc_sessions.protocols import LoggerProtocol, NullLogger
from cc_sessions.schemas.operations.discovery import (
    DiscoveryFailure,
    DiscoverySummary,
    LocalSource,
    Session,
    SessionSource,
)
from cc_sessions.services.builder import build_session
from cc_sessions.services.remote import remote_cache_dir, remote_source
from cc_sessions.services.search import compile_search_pattern, search_sessions

__all__ = [
    'SessionDiscoveryService',
    'filter_sessions',
    'find_sessions',
    'sort_by_modified',
]

# Locates sessions under one root with a given source tag
Locator = Callable[[Path, SessionSource], list[Session]]


def sort_by_modified(sessions: Iterable[Session]) -> list[Session]:
    """Newest first. Ties keep no particular order."""
    return sorted(sessions, key=lambda s: s.modified, reverse=True)


def find_sessions(
    root: Path,
    source: SessionSource | None = None,
    max_workers: int | None = None,
) -> list[Session]:
    """
    Find all sessions under one root.

    Every candidate file is built independently in a thread pool; the results
    are collected and then sorted once.

    Args:
        root: Projects root (local, or a remote's cache directory)
        source: Source tag for every session found
        max_workers: Thread pool size (None = executor default)

    Returns:
        Sessions sorted by modified time, newest first

    Raises:
        OSError: If root itself cannot be listed
    """
    files = list(iter_session_files(root))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        built = executor.map(lambda p: build_session(p, p.parent.name, source), files)
        sessions = [session for session in built if session is not None]

    return sort_by_modified(sessions)


def filter_sessions(
    sessions: Sequence[Session],
    *,
    project: str | None = None,
    min_turns: int = 0,
    include_forks: bool = True,
    text: str | None = None,
    fork_parents: Collection[str] | None = None,
) -> list[Session]:
    """
    Apply the caller-facing filter knobs, preserving order.

    Args:
        sessions: Sessions to filter
        project: Case-insensitive substring of the project name
        min_turns: Minimum turn count
        include_forks: When False, hide forks whose parent is in fork_parents
            (orphaned forks stay visible, like roots in the picker)
        text: Case-insensitive substring of the transcript text
        fork_parents: Known session IDs; defaults to the IDs of `sessions`

    Returns:
        Filtered sessions in the original order
    """
    project_lower = project.lower() if project else None
    text_lower = text.lower() if text else None
    known_ids = set(fork_parents) if fork_parents is not None else {s.id for s in sessions}

    result = []
    for session in sessions:
        if project_lower and project_lower not in session.project.lower():
            continue
        if session.turn_count < min_turns:
            continue
        if not include_forks and session.forked_from is not None and session.forked_from in known_ids:
            continue
        if text_lower and text_lower not in session.search_text:
            continue
        result.append(session)
    return result


class SessionDiscoveryService:
    """
    Service for discovering sessions across all sources.

    Sources are the local projects root plus one cache directory per
    configured remote (see services/remote.py). Remotes are processed
    sequentially; the per-file work inside each source is parallel.
    """

    def __init__(
        self,
        projects_dir: Path,
        config: Config | None = None,
        logger: LoggerProtocol | None = None,
        max_workers: int | None = None,
    ) -> None:
        """
        Initialize discovery service.

        Args:
            projects_dir: Local sessions root (usually ~/.claude/projects)
            config: Remote configuration (None = no remotes)
            logger: Receives warnings about failed sources
            max_workers: Thread pool size for per-file work
        """
        self.projects_dir = projects_dir
        self.config = config or Config()
        self.logger = logger or NullLogger()
        self.max_workers = max_workers

    def validate_source(self, source_filter: str | None) -> None:
        """
        Raises:
            UnknownSourceError: If the filter is neither 'local' nor a configured remote
        """
        if source_filter is not None and source_filter not in self.config.source_names():
            raise UnknownSourceError(source_filter, self.config.source_names())

    def discover(self, source_filter: str | None = None) -> DiscoverySummary:
        """
        Discover sessions from every eligible source.

        Args:
            source_filter: 'local', a remote name, or None for all sources

        Returns:
            DiscoverySummary with merged sessions (newest first) and per-source failures

        Raises:
            UnknownSourceError: If source_filter names no known source
        """
        self.validate_source(source_filter)
        return self._collect(
            source_filter,
            lambda root, source: find_sessions(root, source, self.max_workers),
        )

    def search(self, pattern: str, source_filter: str | None = None) -> DiscoverySummary:
        """
        Search transcripts of every eligible source for a regex pattern.

        Raises:
            InvalidSearchPatternError: If the pattern does not compile
            UnknownSourceError: If source_filter names no known source
        """
        self.validate_source(source_filter)
        regex = compile_search_pattern(pattern)
        return self._collect(
            source_filter,
            lambda root, source: search_sessions(root, regex, source, self.max_workers),
        )

    def matching_ids(self, pattern: str, source_filter: str | None = None) -> frozenset[str]:
        """IDs of sessions whose transcript matches the pattern (for navigation)."""
        summary = self.search(pattern, source_filter)
        for failure in summary.failures:
            self.logger.warning(f"Search skipped source '{failure.source_name}': {failure.reason}")
        return frozenset(session.id for session in summary.sessions)

    def _sources(self, source_filter: str | None) -> list[tuple[Path, SessionSource]]:
        """Roots that exist and pass the filter. Missing roots have simply never synced."""
        sources: list[tuple[Path, SessionSource]] = []

        if source_filter in (None, 'local') and self.projects_dir.exists():
            sources.append((self.projects_dir, LocalSource()))

        for name, remote in self.config.remotes.items():
            if source_filter not in (None, name):
                continue
            cache_dir = remote_cache_dir(self.config.settings, name)
            if not cache_dir.exists():
                self.logger.info(f"Remote '{name}' has no cache yet, skipping")
                continue
            sources.append((cache_dir, remote_source(name, remote)))

        return sources

    def _collect(self, source_filter: str | None, locate: Locator) -> DiscoverySummary:
        sessions: list[Session] = []
        failures: list[DiscoveryFailure] = []

        for root, source in self._sources(source_filter):
            try:
                found = locate(root, source)
            except OSError as e:
                failures.append(DiscoveryFailure(source_name=source.name, reason=str(e)))
                self.logger.warning(f"Failed to read sessions from '{source.name}': {e}")
                continue
            self.logger.info(f"Found {len(found)} sessions in '{source.name}' ({root})")
            sessions.extend(found)

        return DiscoverySummary(sessions=sort_by_modified(sessions), failures=failures)

