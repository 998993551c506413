"""
Single-pass session scanner.

Streams a transcript once, line by line, and extracts:
- head metadata: project path (first cwd), first real prompt, fork parent
- turn count over the whole file
- lowercase search text from every user/assistant text block

Lines that are not JSON objects are skipped; one bad line never aborts the scan.
The scan cannot stop early because the turn count and search text need the
whole file even after the head metadata is resolved.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import attrs
import orjson

from cc_sessions.services.classification import counts_as_turn, is_first_prompt_candidate

__all__ = [
    'FIRST_PROMPT_MAX_CHARS',
    'ScanResult',
    'extract_all_text',
    'extract_first_text',
    'message_content',
    'normalize_summary',
    'scan_lines',
    'scan_session',
]

FIRST_PROMPT_MAX_CHARS = 50


@attrs.define(frozen=True)
class ScanResult:
    """Everything the scanner learns from one pass over a transcript."""

    project_path: str = ''
    first_prompt: str | None = None
    forked_from: str | None = None
    turn_count: int = 0
    search_text: str = ''


# ==============================================================================
# Text extraction
# ==============================================================================


def message_content(record: dict[str, Any]) -> Any:
    """Return record['message']['content'], or None if the shape doesn't match."""
    message = record.get('message')
    if not isinstance(message, dict):
        return None
    return message.get('content')


def _text_blocks(content: list[Any]) -> Iterable[str]:
    for block in content:
        if isinstance(block, dict) and block.get('type') == 'text':
            text = block.get('text')
            if isinstance(text, str):
                yield text


def extract_first_text(content: Any) -> str | None:
    """Text of a message payload for head purposes: the string, or the first text block."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return next(iter(_text_blocks(content)), None)
    return None


def extract_all_text(content: Any) -> str | None:
    """Text of a message payload for search: the string, or all text blocks space-joined."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = list(_text_blocks(content))
        return ' '.join(texts) if texts else None
    return None


def normalize_summary(text: str, max_chars: int) -> str:
    """
    Normalize text for display: collapse whitespace, strip markdown, truncate gracefully.

    Truncation breaks at the last space when that is past the halfway point,
    otherwise at max_chars, and appends '...'.

    Examples:
        >>> normalize_summary('hello   world\\n\\ntest', 50)
        'hello world test'
        >>> normalize_summary('## Sub heading', 50)
        'Sub heading'
    """
    normalized = ' '.join(text.split())
    stripped = normalized.lstrip('#*').lstrip()

    if len(stripped) <= max_chars:
        return stripped

    truncated = stripped[:max_chars]
    break_point = truncated.rfind(' ')
    if break_point <= max_chars // 2:
        break_point = len(truncated)

    return f'{truncated[:break_point]}...'


# ==============================================================================
# Scanning
# ==============================================================================


def scan_lines(lines: Iterable[bytes | str]) -> ScanResult:
    """
    Scan transcript lines once.

    Args:
        lines: Raw JSONL lines (bytes from a binary file, or str)

    Returns:
        ScanResult with head metadata, turn count and lowercase search text
    """
    project_path = ''
    first_prompt: str | None = None
    forked_from: str | None = None
    turn_count = 0
    search_parts: list[str] = []

    for line in lines:
        try:
            record = orjson.loads(line)
        except orjson.JSONDecodeError:
            continue
        if not isinstance(record, dict):
            continue

        record_type = record.get('type')

        if not project_path:
            cwd = record.get('cwd')
            if isinstance(cwd, str):
                project_path = cwd

        if forked_from is None:
            fork = record.get('forkedFrom')
            if isinstance(fork, dict) and isinstance(fork.get('sessionId'), str):
                forked_from = fork['sessionId']

        if record_type == 'user':
            text = extract_first_text(message_content(record))
            if text is not None:
                if first_prompt is None and is_first_prompt_candidate(text):
                    first_prompt = normalize_summary(text, FIRST_PROMPT_MAX_CHARS)
                if counts_as_turn(text):
                    turn_count += 1

        if record_type in ('user', 'assistant'):
            all_text = extract_all_text(message_content(record))
            if all_text:
                search_parts.append(all_text.lower())

    return ScanResult(
        project_path=project_path,
        first_prompt=first_prompt,
        forked_from=forked_from,
        turn_count=turn_count,
        search_text='\n'.join(search_parts),
    )


def scan_session(file: Iterable[bytes]) -> ScanResult:
    """Scan an open session file (binary mode) exactly once."""
    return scan_lines(file)
