"""
Transcript preview rendering for the picker's preview pane.

Pure with respect to navigation: reads the file, returns text, touches no
state. Colors are plain ANSI escapes.
"""

from __future__ import annotations

import re
from pathlib import Path

import orjson

from cc_sessions.services.scanner import extract_first_text, message_content

__all__ = [
    'DEFAULT_MAX_LINES',
    'render_preview',
    'truncate_str',
]

DEFAULT_MAX_LINES = 100

# ANSI colors: cyan for user, yellow for assistant, bold red for matches
CYAN = '\x1b[36m'
YELLOW = '\x1b[33m'
HIGHLIGHT = '\x1b[1;31m'
RESET = '\x1b[0m'

USER_MAX_CHARS = 120
ASSISTANT_MAX_CHARS = 80


def truncate_str(s: str, max_chars: int) -> str:
    """Truncate string to max chars, adding ... if truncated."""
    if len(s) <= max_chars:
        return s
    return f'{s[:max_chars]}...'


def _preview_regex(pattern: str | None) -> re.Pattern[str] | None:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error:
        # Preview must not fail; an unparsable pattern is matched literally
        return re.compile(re.escape(pattern))


def _highlight(text: str, regex: re.Pattern[str], base_color: str) -> str:
    return regex.sub(lambda m: f'{HIGHLIGHT}{m.group(0)}{RESET}{base_color}', text)


def _message_line(record: dict[str, object]) -> tuple[str, str, str] | None:
    """(label, color, full text) for a displayable record, or None."""
    record_type = record.get('type')
    text = extract_first_text(message_content(record))
    if not text:
        return None

    if record_type == 'user':
        # Skip system prompts, XML content and commands
        if text.startswith(('[', '<', '/')):
            return None
        return 'U', CYAN, text
    if record_type == 'assistant':
        return 'A', YELLOW, text
    return None


def render_preview(filepath: Path, pattern: str | None = None, max_lines: int = DEFAULT_MAX_LINES) -> str:
    """
    Render a session transcript as colored preview text.

    Args:
        filepath: Session JSONL file
        pattern: When set, only messages matching it are shown, with matches highlighted
        max_lines: Maximum number of message lines

    Returns:
        Preview text (never raises for unreadable files or bad records)
    """
    regex = _preview_regex(pattern)
    lines: list[str] = []

    try:
        with open(filepath, 'rb') as f:
            for raw in f:
                if len(lines) >= max_lines:
                    break
                try:
                    record = orjson.loads(raw)
                except orjson.JSONDecodeError:
                    continue
                if not isinstance(record, dict):
                    continue

                message = _message_line(record)
                if message is None:
                    continue
                label, color, text = message

                if regex is not None:
                    # Show the matching line of the message, not just its first line
                    match_line = next((ln for ln in text.splitlines() if regex.search(ln)), None)
                    if match_line is None:
                        continue
                    shown = _highlight(match_line.strip(), regex, color)
                else:
                    first_line = next(iter(text.splitlines()), text)
                    max_chars = USER_MAX_CHARS if label == 'U' else ASSISTANT_MAX_CHARS
                    shown = truncate_str(first_line, max_chars)

                lines.append(f'{color}{label}: {shown}{RESET}')
    except OSError as e:
        return f'(could not read session: {e})'

    if not lines:
        return '(no matches)' if regex is not None else '(empty session)'

    if regex is not None:
        lines.insert(0, f'Matches for /{pattern}/:')
    return '\n'.join(lines)
