"""
Tests for transcript preview rendering.
"""

from __future__ import annotations

from pathlib import Path

from cc_sessions.services.preview import CYAN, HIGHLIGHT, RESET, YELLOW, render_preview, truncate_str
from tests.helpers import assistant, summary, user, write_session


def test_renders_user_and_assistant_first_lines(tmp_path: Path) -> None:
    path = write_session(
        tmp_path,
        [
            user('Hello there'),
            assistant('Hi! How can I help?\nSecond line'),
            user('<command-name>/model</command-name>'),
            user('/clear'),
            user('[Request interrupted by user]'),
            summary('ignored'),
        ],
    )

    assert render_preview(path) == f'{CYAN}U: Hello there{RESET}\n{YELLOW}A: Hi! How can I help?{RESET}'


def test_truncates_long_lines(tmp_path: Path) -> None:
    path = write_session(tmp_path, [user('x' * 200), assistant('y' * 100)])

    lines = render_preview(path).split('\n')

    assert lines[0] == f'{CYAN}U: {"x" * 120}...{RESET}'
    assert lines[1] == f'{YELLOW}A: {"y" * 80}...{RESET}'


def test_empty_session(tmp_path: Path) -> None:
    path = write_session(tmp_path, [summary('only a summary'), 'garbage'])
    assert render_preview(path) == '(empty session)'


def test_pattern_shows_matching_line_highlighted(tmp_path: Path) -> None:
    path = write_session(
        tmp_path,
        [
            user('first line\nthe needle here'),
            assistant('nothing relevant'),
        ],
    )

    assert render_preview(path, 'needle') == (
        f'Matches for /needle/:\n{CYAN}U: the {HIGHLIGHT}needle{RESET}{CYAN} here{RESET}'
    )


def test_pattern_without_matches(tmp_path: Path) -> None:
    path = write_session(tmp_path, [user('hello')])
    assert render_preview(path, 'absent') == '(no matches)'


def test_invalid_pattern_is_matched_literally(tmp_path: Path) -> None:
    path = write_session(tmp_path, [user('call f( now'), user('call g now')])

    output = render_preview(path, 'f(')

    assert 'f(' in output
    assert 'g now' not in output


def test_max_lines(tmp_path: Path) -> None:
    path = write_session(tmp_path, [user(f'message {n}') for n in range(10)])

    assert len(render_preview(path, max_lines=3).split('\n')) == 3


def test_unreadable_file(tmp_path: Path) -> None:
    assert render_preview(tmp_path / 'missing.jsonl').startswith('(could not read session:')


def test_truncate_str() -> None:
    assert truncate_str('short', 10) == 'short'
    assert truncate_str('exactly10!', 10) == 'exactly10!'
    assert truncate_str('a bit too long', 5) == 'a bit...'
