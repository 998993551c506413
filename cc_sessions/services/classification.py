"""
Classification of user-message text.

Two predicates with different bracket rules:

- counts_as_turn() excludes ALL bracket-prefixed text ([local command output], ...)
- is_first_prompt_candidate() excludes only the "[Request" prefix, so other
  bracketed text may still become the displayed first message
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    'MessageKind',
    'classify_user_text',
    'counts_as_turn',
    'is_first_prompt_candidate',
]


class MessageKind(Enum):
    """Classification for user-message text when computing session metrics."""

    EMPTY = 'empty'
    SLASH_COMMAND = 'slash_command'
    COMMAND_TAG = 'command_tag'
    BRACKETED_OUTPUT = 'bracketed_output'
    USER_CONTENT = 'user_content'


def classify_user_text(text: str) -> MessageKind:
    """Classify a user text payload, checking prefixes in a fixed order."""
    if not text:
        return MessageKind.EMPTY
    if text.startswith('/'):
        return MessageKind.SLASH_COMMAND
    if text.startswith('<'):
        return MessageKind.COMMAND_TAG
    if text.startswith('['):
        return MessageKind.BRACKETED_OUTPUT
    return MessageKind.USER_CONTENT


def counts_as_turn(text: str) -> bool:
    """Whether a user text counts as a conversation turn."""
    return classify_user_text(text) is MessageKind.USER_CONTENT


def is_first_prompt_candidate(text: str) -> bool:
    """
    Whether a user text may become the session's displayed first message.

    Excludes slash commands, XML/system tags, and only "[Request..." bracketed
    system content (not all bracketed text).
    """
    if not text:
        return False
    return not (text.startswith('/') or text.startswith('<') or text.startswith('[Request'))
