"""
Tests for user-message classification.

The two predicates disagree about bracketed text on purpose; these tests pin
that asymmetry.
"""

from __future__ import annotations

import pytest

from cc_sessions.services.classification import (
    MessageKind,
    classify_user_text,
    counts_as_turn,
    is_first_prompt_candidate,
)


@pytest.mark.parametrize(
    ('text', 'kind'),
    [
        ('', MessageKind.EMPTY),
        ('/clear', MessageKind.SLASH_COMMAND),
        ('<command-name>/model</command-name>', MessageKind.COMMAND_TAG),
        ('[local command output]', MessageKind.BRACKETED_OUTPUT),
        ('Fix the login bug', MessageKind.USER_CONTENT),
    ],
)
def test_classify_user_text(text: str, kind: MessageKind) -> None:
    assert classify_user_text(text) is kind


def test_only_user_content_counts_as_turn() -> None:
    assert counts_as_turn('Fix the login bug')
    assert not counts_as_turn('')
    assert not counts_as_turn('/compact')
    assert not counts_as_turn('<system-reminder>x</system-reminder>')
    assert not counts_as_turn('[Request interrupted by user]')
    assert not counts_as_turn('[local command output]')


def test_first_prompt_excludes_only_request_brackets() -> None:
    assert not is_first_prompt_candidate('[Request interrupted by user]')
    assert is_first_prompt_candidate('[local command output]')
    assert not is_first_prompt_candidate('/clear')
    assert not is_first_prompt_candidate('<command-name>')
    assert not is_first_prompt_candidate('')


def test_bracketed_text_is_candidate_but_not_turn() -> None:
    text = '[Image #1] what is this?'
    assert is_first_prompt_candidate(text)
    assert not counts_as_turn(text)
