"""
Tests for building and launching the claude resume command.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cc_sessions import launcher
from cc_sessions.launcher import build_claude_argv, build_launch_command, launch_claude_with_session
from cc_sessions.schemas.operations.discovery import RemoteSource
from tests.helpers import make_session, sid


def test_resume_and_fork_argv() -> None:
    assert build_claude_argv('abc') == ['claude', '--resume', 'abc']
    assert build_claude_argv('abc', fork=True) == ['claude', '--resume', 'abc', '--fork-session']
    assert build_claude_argv('abc', extra_args=['--model', 'opus']) == [
        'claude',
        '--resume',
        'abc',
        '--model',
        'opus',
    ]


def test_local_session_runs_claude_directly() -> None:
    session = make_session(sid(1))
    assert build_launch_command(session) == ['claude', '--resume', sid(1)]


def test_remote_session_runs_over_ssh() -> None:
    session = make_session(
        sid(1),
        project_path='/home/me/my project',
        source=RemoteSource(name='ws', host='10.0.0.5', user='me'),
    )

    argv = build_launch_command(session, fork=True)

    assert argv == [
        'ssh',
        '-t',
        'me@10.0.0.5',
        f"cd '/home/me/my project' && claude --resume {sid(1)} --fork-session",
    ]


def test_remote_session_without_project_path() -> None:
    session = make_session(sid(1), project_path='', source=RemoteSource(name='box', host='box'))
    assert build_launch_command(session) == ['ssh', '-t', 'box', f'claude --resume {sid(1)}']


def test_launch_changes_directory_and_execs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: dict[str, object] = {}
    monkeypatch.setattr(launcher.shutil, 'which', lambda name: f'/usr/bin/{name}')
    monkeypatch.setattr(launcher.os, 'chdir', lambda path: calls.setdefault('chdir', path))
    monkeypatch.setattr(launcher.os, 'execvp', lambda file, args: calls.setdefault('execvp', (file, args)))

    launch_claude_with_session(make_session(sid(1), project_path=str(tmp_path)), extra_args=['--verbose'])

    assert calls['chdir'] == str(tmp_path)
    assert calls['execvp'] == ('claude', ['claude', '--resume', sid(1), '--verbose'])


def test_launch_without_claude_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(launcher.shutil, 'which', lambda name: None)

    with pytest.raises(RuntimeError, match='claude not found'):
        launch_claude_with_session(make_session(sid(1)))
