"""
Tests for parsing fzf output and handling its exit status.
"""

from __future__ import annotations

import subprocess

import pytest

from cc_sessions.cli import picker as picker_module
from cc_sessions.cli.picker import FzfPicker, parse_fzf_output
from cc_sessions.exceptions import PickerError
from cc_sessions.protocols import PickerResult


def test_enter_has_empty_key_line() -> None:
    output = 'lo\n\nabc-id\t/tmp/abc.jsonl\t5m  5m  proj  hello\n'
    assert parse_fzf_output(output) == PickerResult(key='enter', query='lo', selected_id='abc-id')


def test_expected_key_and_query() -> None:
    output = 'needle\nctrl-s\nabc-id\t/tmp/abc.jsonl\ttext\n'
    assert parse_fzf_output(output) == PickerResult(key='ctrl-s', query='needle', selected_id='abc-id')


def test_arrow_keys() -> None:
    assert parse_fzf_output('\nright\nid\tp\tt\n').key == 'right'
    assert parse_fzf_output('\nleft\nid\tp\tt\n').key == 'left'
    assert parse_fzf_output('\nesc\n').key == 'esc'


def test_no_selection() -> None:
    result = parse_fzf_output('query only\nesc\n')

    assert result.selected_id is None
    assert result.query == 'query only'


def test_empty_output() -> None:
    assert parse_fzf_output('') == PickerResult(key='enter')


# ==============================================================================
# Exit status
# ==============================================================================


def _fake_fzf(monkeypatch: pytest.MonkeyPatch, returncode: int, stdout: str = '', stderr: str = '') -> None:
    monkeypatch.setattr(picker_module.shutil, 'which', lambda name: f'/usr/bin/{name}')

    def run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(argv, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(picker_module.subprocess, 'run', run)


def test_fzf_error_raises_picker_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_fzf(monkeypatch, 2, stderr='unknown option: --print-query\n')

    with pytest.raises(PickerError) as exc_info:
        FzfPicker().pick([], header='h')

    assert exc_info.value.returncode == 2
    assert exc_info.value.reason == 'unknown option: --print-query'


def test_fzf_error_without_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_fzf(monkeypatch, 2)

    with pytest.raises(PickerError, match='exit status 2'):
        FzfPicker().pick([], header='h')


def test_interrupt_aborts(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_fzf(monkeypatch, 130)
    assert FzfPicker().pick([], header='h') == PickerResult(key='abort')


def test_no_match_still_returns_query(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_fzf(monkeypatch, 1, stdout='zzz\nctrl-s\n')
    assert FzfPicker().pick([], header='h') == PickerResult(key='ctrl-s', query='zzz')
