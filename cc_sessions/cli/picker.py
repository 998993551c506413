"""
fzf-backed picker - implements the Picker protocol.

Each row is sent to fzf as three tab-separated fields:

    <session id> \\t <transcript path> \\t <display text>

Only the display text is shown and matched; the id comes back with the
selection and the path feeds the preview command.
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
from collections.abc import Sequence

from cc_sessions.exceptions import PickerError
from cc_sessions.protocols import PickerItem, PickerKey, PickerResult

__all__ = ['EXPECTED_KEYS', 'FzfPicker', 'parse_fzf_output']

EXPECTED_KEYS: tuple[PickerKey, ...] = ('esc', 'ctrl-s', 'right', 'left')


def _sanitize(text: str) -> str:
    return text.replace('\t', ' ').replace('\n', ' ')


def parse_fzf_output(stdout: str) -> PickerResult:
    """
    Parse fzf output produced with --print-query and --expect.

    Layout: query line, pressed key line (empty for enter), then the selected row.
    """
    lines = stdout.split('\n')
    query = lines[0] if lines else ''
    key_line = lines[1] if len(lines) > 1 else ''
    row = lines[2] if len(lines) > 2 else ''

    key: PickerKey = 'enter'
    for expected in EXPECTED_KEYS:
        if key_line == expected:
            key = expected
            break

    selected_id = row.split('\t', 1)[0] if row else ''
    return PickerResult(key=key, query=query, selected_id=selected_id or None)


class FzfPicker:
    """Runs fzf once per call; blocks until a bound key is pressed."""

    def __init__(self, preview_command: Sequence[str] | None = None) -> None:
        """
        Args:
            preview_command: argv prefix that prints a preview for a transcript path
                (default: this interpreter running `cc-sessions preview`)
        """
        if shutil.which('fzf') is None:
            raise RuntimeError('fzf not found in PATH.\nInstall from: https://github.com/junegunn/fzf')
        self.preview_command = list(preview_command or [sys.executable, '-m', 'cc_sessions.cli.main', 'preview'])

    def _preview(self, preview_pattern: str | None) -> str:
        argv = [*self.preview_command]
        if preview_pattern:
            argv += ['--pattern', preview_pattern]
        return ' '.join(shlex.quote(arg) for arg in argv) + ' {2}'

    def pick(
        self,
        items: Sequence[PickerItem],
        *,
        header: str,
        query: str = '',
        preview_pattern: str | None = None,
    ) -> PickerResult:
        """
        Raises:
            PickerError: If fzf exits with an error (bad option, no terminal)
        """
        rows = '\n'.join(
            f'{_sanitize(item.item_id)}\t{_sanitize(str(item.preview_path()))}\t{_sanitize(item.display_text())}'
            for item in items
        )
        argv = [
            'fzf',
            '--ansi',
            '--height=100%',
            '--delimiter=\t',
            '--with-nth=3',
            '--print-query',
            f'--expect={",".join(EXPECTED_KEYS)}',
            f'--header={header}',
            '--prompt=filter> ',
            f'--query={query}',
            f'--preview={self._preview(preview_pattern)}',
            '--preview-window=right:50%:wrap',
        ]
        # fzf draws on /dev/tty, so stderr carries only its error messages
        result = subprocess.run(argv, input=rows, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)

        # 0 = selection, 1 = no match (query still printed), 130 = interrupted
        if result.returncode == 130:
            return PickerResult(key='abort')
        if result.returncode not in (0, 1):
            raise PickerError(result.returncode, result.stderr.strip() or 'fzf exited without output')
        return parse_fzf_output(result.stdout)
