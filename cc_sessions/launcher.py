"""
Claude Code launcher utility.

Provides functionality to resume or fork a discovered session.
"""

from __future__ import annotations

import os
import shlex
import shutil
from collections.abc import Sequence

from cc_sessions.schemas.operations.discovery import RemoteSource, Session

__all__ = ['build_claude_argv', 'build_launch_command', 'launch_claude_with_session']


def build_claude_argv(session_id: str, fork: bool = False, extra_args: Sequence[str] = ()) -> list[str]:
    """argv for `claude --resume <id>`, with --fork-session when forking."""
    argv = ['claude', '--resume', session_id]
    if fork:
        argv.append('--fork-session')
    argv.extend(extra_args)
    return argv


def build_launch_command(session: Session, fork: bool = False, extra_args: Sequence[str] = ()) -> list[str]:
    """
    Full argv that resumes the session where it lives.

    Local sessions run claude directly (the caller changes into the project
    directory). Remote sessions run it over `ssh -t`, changing directory on
    the remote side.
    """
    claude_argv = build_claude_argv(session.id, fork, extra_args)
    if not isinstance(session.source, RemoteSource):
        return claude_argv

    remote_command = shlex.join(claude_argv)
    if session.project_path:
        remote_command = f'cd {shlex.quote(session.project_path)} && {remote_command}'
    return ['ssh', '-t', session.source.ssh_target, remote_command]


def launch_claude_with_session(session: Session, fork: bool = False, extra_args: Sequence[str] = ()) -> None:
    """
    Launch Claude Code for a session, replacing current process.

    Uses os.execvp() for clean process handoff - the current process
    is replaced, so this function never returns.

    Args:
        session: Session to resume
        fork: Fork into a new session ID instead of resuming
        extra_args: Additional arguments passed through to claude

    Raises:
        RuntimeError: If the claude (or ssh) executable is not found in PATH
    """
    argv = build_launch_command(session, fork, extra_args)

    if shutil.which(argv[0]) is None:
        raise RuntimeError(f'{argv[0]} not found in PATH.\nInstall Claude Code from: https://claude.ai/code')

    if not session.is_remote and session.project_path and os.path.isdir(session.project_path):
        os.chdir(session.project_path)

    # Replace current process with Claude
    os.execvp(argv[0], argv)
