"""
Display formatting for session listings and picker rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from cc_sessions.schemas.operations.discovery import Session

__all__ = [
    'format_session_desc',
    'format_session_row',
    'format_table',
    'format_time_relative',
]


def format_time_relative(time: datetime, now: datetime | None = None) -> str:
    """
    Compact age: 'now', then minutes, hours, days, weeks.

    Examples:
        >>> from datetime import timedelta
        >>> t = datetime(2025, 1, 1, tzinfo=UTC)
        >>> format_time_relative(t - timedelta(hours=3), now=t)
        '3h'
    """
    now = now or datetime.now(UTC)
    secs = max(0, int((now - time).total_seconds()))

    if secs < 60:
        return 'now'
    if secs < 3600:
        return f'{secs // 60}m'
    if secs < 86400:
        return f'{secs // 3600}h'
    if secs < 604800:
        return f'{secs // 86400}d'
    return f'{secs // 604800}w'


def format_session_desc(session: Session, max_chars: int) -> str:
    """Show name (★) if present, otherwise summary, otherwise first message."""
    if session.name:
        # Named sessions show ★ prefix with name, then summary if space allows
        prefix = f'★ {session.name}'
        if len(prefix) >= max_chars:
            return prefix[:max_chars]
        if session.summary:
            remaining = max_chars - len(prefix) - 3  # " - " separator
            if remaining > 10:
                return f'{prefix} - {session.summary[:remaining]}'
        return prefix

    text = session.summary or session.first_message or ''
    return text[:max_chars]


def format_session_row(
    session: Session,
    child_count: int = 0,
    now: datetime | None = None,
    desc_chars: int = 50,
) -> str:
    """One picker/listing row: CREAT MOD PROJECT [@source] [+forks] description."""
    project = session.project if not session.is_remote else f'{session.project}@{session.source_name}'
    badges = f'[+{child_count}] ' if child_count else ''
    fork_marker = '↳ ' if session.is_fork else ''
    return (
        f'{format_time_relative(session.created, now):<6} '
        f'{format_time_relative(session.modified, now):<6} '
        f'{project:<16} '
        f'{fork_marker}{badges}{format_session_desc(session, desc_chars)}'
    )


def format_table(
    sessions: Sequence[Session],
    count: int,
    debug: bool = False,
    now: datetime | None = None,
) -> str:
    """Flat listing of the newest `count` sessions."""
    lines: list[str] = []
    shown = sessions[:count]

    if debug:
        lines.append(f'{"CREAT":<6} {"MOD":<6} {"TURNS":<6} {"SOURCE":<10} {"PROJECT":<16} {"ID":<38} SUMMARY')
        lines.append('─' * 120)
        for session in shown:
            lines.append(
                f'{format_time_relative(session.created, now):<6} '
                f'{format_time_relative(session.modified, now):<6} '
                f'{session.turn_count:<6} '
                f'{session.source_name:<10} '
                f'{session.project:<16} '
                f'{session.id:<38} '
                f'{format_session_desc(session, 35)}'
            )
        lines.append('─' * 120)
        lines.append(f'Total: {len(sessions)} sessions')
    else:
        lines.append(f'{"CREAT":<6} {"MOD":<6} {"PROJECT":<16} SUMMARY')
        lines.append('─' * 90)
        for session in shown:
            lines.append(format_session_row(session, now=now, desc_chars=55))
        lines.append('─' * 90)
        lines.append("Use 'cc-sessions pick' for interactive picker, --fork to fork")

    return '\n'.join(lines)
