"""
Session builder.

Combines filesystem timestamps with scanner and tail-reader output into one
immutable Session. Sessions with no project path, no first message and no
summary are dropped as empty.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from cc_sessions.schemas.operations.discovery import LocalSource, Session, SessionSource
from cc_sessions.services.scanner import scan_session
from cc_sessions.services.tail import extract_custom_title_from_file, read_summary_from_tail

__all__ = [
    'HOME_DIR_PREFIXES',
    'PROJECT_DIR_PREFIXES',
    'build_session',
    'extract_project_name',
]

# Home-directory prefixes of Claude's encoded directory names, each followed by a username segment
HOME_DIR_PREFIXES = ('-Users-', '-home-')

# Common parent directories stripped after the home prefix, first match wins
PROJECT_DIR_PREFIXES = (
    'Documents-repos-',
    'Documents-',
    'repos-',
    'third-party-repos-',
)


def extract_project_name(project_path: str, fallback_dir: str) -> str:
    """
    Extract a display project name from the cwd, or from the directory name.

    The directory-name fallback is a best-effort heuristic: Claude's path
    encoding is lossy, so '-Users-me-Documents-repos-foo' only probably means
    project 'foo'.

    Examples:
        >>> extract_project_name('/Users/foo/my-project', 'ignored')
        'my-project'
        >>> extract_project_name('', '-Users-someone-Documents-repos-cc-session')
        'cc-session'
    """
    if project_path:
        return project_path.rsplit('/', 1)[-1] or 'unknown'

    stripped = fallback_dir
    for home_prefix in HOME_DIR_PREFIXES:
        if fallback_dir.startswith(home_prefix):
            _, sep, rest = fallback_dir.removeprefix(home_prefix).partition('-')
            if sep:
                stripped = rest
            break

    for prefix in PROJECT_DIR_PREFIXES:
        if stripped.startswith(prefix):
            stripped = stripped.removeprefix(prefix)
            break

    return stripped or 'unknown'


def build_session(
    filepath: Path,
    parent_dir_name: str,
    source: SessionSource | None = None,
) -> Session | None:
    """
    Build a Session from one transcript file.

    Args:
        filepath: Session JSONL file (stem is the session ID)
        parent_dir_name: Name of the project directory containing the file
        source: Where the file came from (defaults to local)

    Returns:
        The Session, or None if the file is unreadable or the session is empty
    """
    try:
        stat = filepath.stat()
        with open(filepath, 'rb') as f:
            scan = scan_session(f)
    except OSError:
        return None

    summary = read_summary_from_tail(filepath)
    first_message = scan.first_prompt or None

    if not scan.project_path and first_message is None and not summary:
        return None

    modified = datetime.fromtimestamp(stat.st_mtime, tz=UTC)
    birthtime = getattr(stat, 'st_birthtime', None)
    created = datetime.fromtimestamp(birthtime, tz=UTC) if birthtime else modified

    return Session(
        id=filepath.stem,
        source=source or LocalSource(),
        project=extract_project_name(scan.project_path, parent_dir_name),
        project_path=scan.project_path,
        filepath=filepath,
        created=created,
        modified=modified,
        first_message=first_message,
        summary=summary or None,
        name=extract_custom_title_from_file(filepath),
        turn_count=scan.turn_count,
        forked_from=scan.forked_from,
        search_text=scan.search_text,
    )
