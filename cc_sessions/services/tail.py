"""
Tail reader - summary and custom title lookup.

Two independent lookups on the same transcript:

- Summary: only the last SUMMARY_WINDOW_BYTES are inspected. Summaries are
  written at the end of compacted sessions; one written earlier than the
  window in a file that kept growing is missed.
- Custom title: the whole file is searched, because /rename can happen at
  any point and may happen several times. The latest title wins.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import orjson

__all__ = [
    'CUSTOM_TITLE_PATTERN',
    'SUMMARY_WINDOW_BYTES',
    'extract_custom_title_from_file',
    'read_summary_from_tail',
]

SUMMARY_WINDOW_BYTES = 16 * 1024

# Line-level prefilter so only candidate lines are JSON-parsed
CUSTOM_TITLE_PATTERN = re.compile(rb'"type"\s*:\s*"custom-title"')


def read_summary_from_tail(session_file: Path, window: int = SUMMARY_WINDOW_BYTES) -> str | None:
    """
    Read the summary from the trailing window of a session file.

    Args:
        session_file: Path to the session JSONL file
        window: Number of trailing bytes to inspect

    Returns:
        The first summary record's text within the window, or None
    """
    try:
        with open(session_file, 'rb') as f:
            length = f.seek(0, os.SEEK_END)
            start = max(0, length - window)
            f.seek(start)
            content = f.read()
    except OSError:
        return None

    # Seeked mid-file: the first line is partial
    if start > 0:
        newline = content.find(b'\n')
        content = content[newline + 1 :] if newline != -1 else b''

    for line in content.splitlines():
        try:
            record = orjson.loads(line)
        except orjson.JSONDecodeError:
            continue
        if isinstance(record, dict) and record.get('type') == 'summary':
            summary = record.get('summary')
            return summary if isinstance(summary, str) else None

    return None


def extract_custom_title_from_file(session_file: Path) -> str | None:
    """
    Extract the custom title from a session file efficiently.

    Uses a compiled regex to find custom-title records without parsing the
    entire file, then parses only the matching lines. Session files are
    append-only, so if the user renamed multiple times the last one is the
    most recent.

    Args:
        session_file: Path to the session JSONL file

    Returns:
        The custom title string, or None if no custom-title record found
    """
    custom_title: str | None = None
    try:
        with open(session_file, 'rb') as f:
            for line in f:
                if not CUSTOM_TITLE_PATTERN.search(line):
                    continue
                try:
                    record = orjson.loads(line)
                except orjson.JSONDecodeError:
                    continue
                if isinstance(record, dict) and record.get('type') == 'custom-title':
                    title = record.get('customTitle')
                    if isinstance(title, str):
                        custom_title = title
    except OSError:
        return None

    return custom_title
