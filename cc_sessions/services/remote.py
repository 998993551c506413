"""
Remote session cache support.

Sessions on remote machines are mirrored into a local cache with rsync over
SSH, so preview and search run at local-disk speed:

    remote:~/.claude/projects/  -->  ~/.cache/cc-sessions/remotes/<name>/

A `.last_sync` marker in each cache directory holds the decimal
seconds-since-epoch of the last successful refresh. Staleness policy lives
here; the transfer itself is delegated to rsync.
"""

from __future__ import annotations

import subprocess
import time
from enum import Enum
from pathlib import Path

import attrs
from filelock import FileLock

from cc_sessions.config.remotes import DEFAULT_REMOTE_PROJECTS_DIR, Config, RemoteConfig, RemoteSettings
from cc_sessions.exceptions import RemoteSyncError
from cc_sessions.paths import expand_path
from cc_sessions.protocols import LoggerProtocol, NullLogger
from cc_sessions.schemas.operations.discovery import RemoteSource

__all__ = [
    'LAST_SYNC_FILE',
    'RefreshPolicy',
    'SyncResult',
    'is_stale',
    'read_last_sync',
    'refresh_remotes',
    'remote_cache_dir',
    'remote_projects_dir',
    'remote_source',
    'ssh_target',
    'sync_remote',
    'write_last_sync',
]

LAST_SYNC_FILE = '.last_sync'


class RefreshPolicy(str, Enum):
    """When to refresh remote caches before discovery."""

    ALWAYS = 'always'
    IF_STALE = 'if-stale'
    NEVER = 'never'


@attrs.define(frozen=True)
class SyncResult:
    """Result of a sync operation."""

    remote_name: str
    duration_seconds: float


# ==============================================================================
# Path helpers
# ==============================================================================


def remote_cache_dir(settings: RemoteSettings, remote_name: str) -> Path:
    """Get the cache directory for a specific remote."""
    return expand_path(settings.cache_dir) / remote_name


def ssh_target(remote: RemoteConfig) -> str:
    """Build SSH target string: 'user@host' or just 'host'."""
    return f'{remote.user}@{remote.host}' if remote.user else remote.host


def remote_projects_dir(remote: RemoteConfig) -> str:
    """Get the remote projects directory (or default ~/.claude/projects)."""
    return remote.projects_dir or DEFAULT_REMOTE_PROJECTS_DIR


def remote_source(name: str, remote: RemoteConfig) -> RemoteSource:
    """Source tag for sessions located in a remote's cache."""
    return RemoteSource(name=name, host=remote.host, user=remote.user)


# ==============================================================================
# Staleness tracking
# ==============================================================================


def read_last_sync(cache_dir: Path) -> float | None:
    """
    Read the last successful refresh time from the marker file.

    Returns:
        Seconds since epoch, or None if the marker is missing or unreadable
    """
    marker = cache_dir / LAST_SYNC_FILE
    try:
        return float(int(marker.read_text(encoding='utf-8').strip()))
    except (OSError, ValueError):
        return None


def write_last_sync(cache_dir: Path, now: float | None = None) -> None:
    """Write the marker atomically using temp file + rename."""
    marker = cache_dir / LAST_SYNC_FILE
    tmp_file = marker.with_name(f'{LAST_SYNC_FILE}.tmp')
    timestamp = int(time.time() if now is None else now)
    tmp_file.write_text(str(timestamp), encoding='utf-8')
    tmp_file.replace(marker)


def is_stale(remote_name: str, settings: RemoteSettings, now: float | None = None) -> bool:
    """
    Check if a remote's cache is stale (older than threshold).

    Never synced (no marker, or an unreadable one) counts as stale.
    """
    last_sync = read_last_sync(remote_cache_dir(settings, remote_name))
    if last_sync is None:
        return True
    current = time.time() if now is None else now
    return current - last_sync > settings.stale_threshold


# ==============================================================================
# Sync operations
# ==============================================================================


def _run_rsync(remote_name: str, source: str, dest: str) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            ['rsync', '-az', '--delete', '-e', 'ssh', '--exclude', '*.lock', source, dest],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise RemoteSyncError(remote_name, f'Failed to execute rsync: {e}') from e


def sync_remote(remote_name: str, remote: RemoteConfig, settings: RemoteSettings) -> SyncResult:
    """
    Sync a remote's sessions to local cache using rsync.

    Uses rsync with:
    - `-a`: Archive mode (preserves timestamps, which drive sort order)
    - `-z`: Compression for transfer
    - `--delete`: Remove files deleted on remote
    - `-e ssh`: Use SSH transport

    A per-remote file lock keeps concurrent cc-sessions processes from
    syncing into the same cache at once.

    Raises:
        RemoteSyncError: If rsync cannot be run or exits non-zero, or if the
            cache directory, lock file or marker cannot be written
    """
    cache_dir = remote_cache_dir(settings, remote_name)

    # The trailing slashes copy contents, not the directory itself
    source = f'{ssh_target(remote)}:{remote_projects_dir(remote)}/'
    dest = f'{cache_dir}/'

    start = time.monotonic()
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        with FileLock(cache_dir.parent / f'{remote_name}.lock'):
            result = _run_rsync(remote_name, source, dest)
            if result.returncode != 0:
                raise RemoteSyncError(remote_name, result.stderr.strip() or f'exit status {result.returncode}')
            write_last_sync(cache_dir)
    except OSError as e:
        raise RemoteSyncError(remote_name, f'Cache update failed: {e}') from e

    return SyncResult(remote_name=remote_name, duration_seconds=time.monotonic() - start)


def refresh_remotes(
    config: Config,
    policy: RefreshPolicy,
    logger: LoggerProtocol | None = None,
    only: str | None = None,
) -> list[SyncResult]:
    """
    Refresh remote caches one at a time according to policy.

    A failed remote is logged and skipped; the others still refresh.

    Args:
        config: Loaded configuration
        policy: ALWAYS, IF_STALE or NEVER
        logger: Receives progress and failure messages
        only: Restrict to one remote name (other names, including 'local', refresh nothing)

    Returns:
        Results for the remotes that were synced successfully
    """
    logger = logger or NullLogger()
    results: list[SyncResult] = []

    if policy is RefreshPolicy.NEVER:
        return results

    for name, remote in config.remotes.items():
        if only is not None and name != only:
            continue
        if policy is RefreshPolicy.IF_STALE and not is_stale(name, config.settings):
            continue

        logger.info(f"Syncing remote '{name}' from {ssh_target(remote)}...")
        try:
            result = sync_remote(name, remote, config.settings)
        except RemoteSyncError as e:
            logger.warning(f"Failed to sync '{name}': {e.reason}")
            continue

        logger.info(f"Synced '{name}' in {result.duration_seconds:.1f}s")
        results.append(result)

    return results
