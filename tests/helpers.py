"""
Builders for transcript records, session files and Session models used across tests.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from cc_sessions.schemas.operations.discovery import LocalSource, Session, SessionSource

BASE_TIME = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


def sid(n: int) -> str:
    """Deterministic session ID with canonical UUID shape."""
    return f'{n:08x}-0000-4000-8000-000000000000'


def user(content: Any, **extra: Any) -> dict[str, Any]:
    return {'type': 'user', 'message': {'role': 'user', 'content': content}, **extra}


def assistant(text: str, **extra: Any) -> dict[str, Any]:
    return {
        'type': 'assistant',
        'message': {'role': 'assistant', 'content': [{'type': 'text', 'text': text}]},
        **extra,
    }


def summary(text: Any) -> dict[str, Any]:
    return {'type': 'summary', 'summary': text, 'leafUuid': 'leaf-1'}


def custom_title(title: str, session_id: str = 'x') -> dict[str, Any]:
    return {'type': 'custom-title', 'customTitle': title, 'sessionId': session_id}


def write_session(
    project_dir: Path,
    records: Iterable[Mapping[str, Any] | str],
    session_id: str | None = None,
    mtime: float | None = None,
) -> Path:
    """Write records as JSONL (strings are written verbatim) and optionally set the mtime."""
    project_dir.mkdir(parents=True, exist_ok=True)
    path = project_dir / f'{session_id or sid(1)}.jsonl'
    lines = [record if isinstance(record, str) else json.dumps(record) for record in records]
    path.write_text(''.join(f'{line}\n' for line in lines), encoding='utf-8')
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def make_session(
    session_id: str,
    *,
    minutes_ago: int = 0,
    forked_from: str | None = None,
    project: str = 'proj',
    project_path: str = '/Users/me/proj',
    source: SessionSource | None = None,
    turn_count: int = 1,
    first_message: str | None = 'hello',
    summary: str | None = None,
    name: str | None = None,
    search_text: str = '',
    now: datetime = BASE_TIME,
) -> Session:
    """In-memory Session; modified is `minutes_ago` before `now`."""
    modified = now - timedelta(minutes=minutes_ago)
    return Session(
        id=session_id,
        source=source or LocalSource(),
        project=project,
        project_path=project_path,
        filepath=Path(f'/tmp/{session_id}.jsonl'),
        created=modified,
        modified=modified,
        first_message=first_message,
        summary=summary,
        name=name,
        turn_count=turn_count,
        forked_from=forked_from,
        search_text=search_text,
    )


class RecordingLogger:
    """LoggerProtocol implementation that keeps messages for assertions."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)
