#!/usr/bin/env python3
"""
Command-line interface for cc-sessions.

Lists, searches and interactively picks Claude Code sessions from the local
machine and from mirrored remote machines.
"""

from __future__ import annotations

import traceback
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

import attrs
import pydantic
import typer

from cc_sessions.cli.interactive import run_interactive
from cc_sessions.cli.logger import CLILogger
from cc_sessions.cli.picker import FzfPicker
from cc_sessions.config.base import AppSettings, get_settings
from cc_sessions.config.remotes import Config, load_config
from cc_sessions.exceptions import CcSessionsError
from cc_sessions.launcher import launch_claude_with_session
from cc_sessions.paths import expand_path, resolve_projects_dir
from cc_sessions.schemas.operations.discovery import DiscoverySummary, Session
from cc_sessions.services.discovery import SessionDiscoveryService, filter_sessions
from cc_sessions.services.display import format_table, format_time_relative
from cc_sessions.services.lineage import SessionCatalog
from cc_sessions.services.preview import render_preview
from cc_sessions.services.remote import (
    RefreshPolicy,
    is_stale,
    read_last_sync,
    refresh_remotes,
    remote_cache_dir,
    ssh_target,
)

app = typer.Typer(
    name='cc-sessions',
    help='List, search and resume Claude Code sessions (local and remote)',
    add_completion=False,
)


# ==============================================================================
# Shared setup
# ==============================================================================


@attrs.define(frozen=True)
class CliContext:
    """Immutable configuration resolved once per command invocation."""

    settings: AppSettings
    config: Config
    projects_dir: Path
    logger: CLILogger

    def discovery(self) -> SessionDiscoveryService:
        return SessionDiscoveryService(
            self.projects_dir,
            config=self.config,
            logger=self.logger,
            max_workers=self.settings.MAX_WORKERS,
        )


def _load_context(verbose: bool) -> CliContext:
    """Resolve settings, remote config and the local root (fatal on failure)."""
    logger = CLILogger(verbose=verbose)
    try:
        settings = get_settings(AppSettings)
    except (pydantic.ValidationError, FileNotFoundError) as e:
        typer.secho(f'Error: Invalid settings: {e}', fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    config = load_config(expand_path(settings.CONFIG_FILE))
    projects_dir = resolve_projects_dir(settings.PROJECTS_DIR)
    logger.info(f'Local sessions root: {projects_dir}')
    logger.info(f'Configured remotes: {", ".join(config.remotes) or "none"}')
    return CliContext(settings=settings, config=config, projects_dir=projects_dir, logger=logger)


def _refresh(ctx: CliContext, policy: RefreshPolicy, source: str | None) -> None:
    if source == 'local':
        return
    refresh_remotes(ctx.config, policy, ctx.logger, only=source)


def _report_failures(summary: DiscoverySummary) -> None:
    """Partial failures are non-fatal: warn next to whatever was gathered."""
    for failure in summary.failures:
        typer.secho(
            f"Warning: source '{failure.source_name}' skipped: {failure.reason}",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _require_sessions(sessions: Sequence[Session], summary: DiscoverySummary, ctx: CliContext) -> None:
    """Exit with a message that distinguishes 'nothing at all' from 'nothing matches'."""
    if sessions:
        return
    if not summary.sessions:
        typer.secho('No sessions found', fg=typer.colors.YELLOW, err=True)
        typer.echo(f'Searched in: {ctx.projects_dir}', err=True)
    else:
        typer.secho('No sessions match the given filters', fg=typer.colors.YELLOW, err=True)
    raise typer.Exit(1)


def _fail(e: Exception, verbose: bool) -> None:
    typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
    if verbose:
        traceback.print_exc()
    raise typer.Exit(1)


# Shared option definitions
ProjectOption = typer.Option(None, '--project', '-p', help='Filter by project name (substring, case-insensitive)')
MinTurnsOption = typer.Option(0, '--min-turns', min=0, help='Only sessions with at least this many turns')
SourceOption = typer.Option(None, '--source', '-s', help="Only one source: 'local' or a remote name")
RefreshOption = typer.Option(RefreshPolicy.IF_STALE, '--refresh', help='Refresh remote caches before listing')
VerboseOption = typer.Option(False, '--verbose', '-v', help='Verbose output')


# ==============================================================================
# Commands
# ==============================================================================


@app.command('list')
def list_sessions(
    count: int = typer.Option(15, '--count', '-n', min=1, help='Number of sessions to show'),
    project: str | None = ProjectOption,
    min_turns: int = MinTurnsOption,
    source: str | None = SourceOption,
    include_forks: bool = typer.Option(False, '--include-forks', help='Also list forked sessions'),
    grep: str | None = typer.Option(None, '--grep', '-g', help='Filter by transcript text (substring)'),
    refresh: RefreshPolicy = RefreshOption,
    debug: bool = typer.Option(False, '--debug', help='Show IDs, sources and turn counts'),
    verbose: bool = VerboseOption,
) -> None:
    """List recent sessions, newest first."""
    try:
        ctx = _load_context(verbose)
        service = ctx.discovery()
        service.validate_source(source)
        _refresh(ctx, refresh, source)

        summary = service.discover(source)
        _report_failures(summary)

        sessions = filter_sessions(
            summary.sessions,
            project=project,
            min_turns=min_turns,
            include_forks=include_forks,
            text=grep,
        )
        _require_sessions(sessions, summary, ctx)
        typer.echo(format_table(sessions, count, debug=debug))

    except CcSessionsError as e:
        _fail(e, verbose)


@app.command()
def search(
    pattern: str = typer.Argument(..., help='Regular expression to search transcripts for'),
    count: int = typer.Option(15, '--count', '-n', min=1, help='Number of sessions to show'),
    project: str | None = ProjectOption,
    min_turns: int = MinTurnsOption,
    source: str | None = SourceOption,
    refresh: RefreshPolicy = RefreshOption,
    debug: bool = typer.Option(False, '--debug', help='Show IDs, sources and turn counts'),
    verbose: bool = VerboseOption,
) -> None:
    """List sessions whose transcript matches a pattern."""
    try:
        ctx = _load_context(verbose)
        service = ctx.discovery()
        service.validate_source(source)
        _refresh(ctx, refresh, source)

        summary = service.search(pattern, source)
        _report_failures(summary)

        sessions = filter_sessions(summary.sessions, project=project, min_turns=min_turns)
        if not sessions:
            typer.secho(f'No sessions match /{pattern}/', fg=typer.colors.YELLOW, err=True)
            raise typer.Exit(1)
        typer.echo(format_table(sessions, count, debug=debug))

    except CcSessionsError as e:
        _fail(e, verbose)


@app.command(context_settings={'allow_extra_args': True, 'ignore_unknown_options': True})
def pick(
    typer_ctx: typer.Context,
    fork: bool = typer.Option(False, '--fork', '-f', help='Fork session instead of resuming (new session ID)'),
    project: str | None = ProjectOption,
    min_turns: int = MinTurnsOption,
    source: str | None = SourceOption,
    refresh: RefreshPolicy = RefreshOption,
    verbose: bool = VerboseOption,
) -> None:
    """Pick a session interactively, then resume or fork it.

    Keys: enter resumes, ctrl-s searches transcripts for the typed query,
    → shows forks of the selected session, ← goes back, esc clears search,
    then focus, then quits.

    Extra arguments after -- are passed to claude CLI:

        cc-sessions pick -- --model opus
    """
    try:
        ctx = _load_context(verbose)
        service = ctx.discovery()
        service.validate_source(source)
        _refresh(ctx, refresh, source)

        summary = service.discover(source)
        _report_failures(summary)

        sessions = filter_sessions(summary.sessions, project=project, min_turns=min_turns)
        _require_sessions(sessions, summary, ctx)

        catalog = SessionCatalog(sessions)
        selected = run_interactive(
            catalog,
            FzfPicker(),
            lambda pattern: service.matching_ids(pattern, source),
            logger=ctx.logger,
            fork=fork,
        )
        if selected is None:
            return

        action = 'Forking' if fork else 'Resuming'
        where = selected.project_path or selected.project
        if selected.is_remote:
            where = f'{where} on {selected.source_name}'
        typer.echo(f'{action} session {selected.id} in {where}')
        launch_claude_with_session(selected, fork=fork, extra_args=typer_ctx.args)

    except (CcSessionsError, RuntimeError) as e:
        _fail(e, verbose)


@app.command()
def preview(
    file: Path = typer.Argument(..., help='Session transcript file'),
    pattern: str | None = typer.Option(None, '--pattern', help='Highlight and filter by this pattern'),
    max_lines: int = typer.Option(100, '--max-lines', min=1, help='Maximum message lines'),
) -> None:
    """Print a colored transcript preview (used by the picker)."""
    # Keep escapes on a pipe: fzf --ansi renders them
    typer.echo(render_preview(file, pattern, max_lines), color=True)


@app.command()
def sync(
    name: str | None = typer.Argument(None, help='Remote to sync (default: all)'),
    force: bool = typer.Option(False, '--force', help='Sync even if the cache is fresh'),
    verbose: bool = VerboseOption,
) -> None:
    """Refresh remote session caches (only stale ones unless --force)."""
    try:
        ctx = _load_context(verbose)
        if not ctx.config.remotes:
            typer.secho('No remotes configured', fg=typer.colors.YELLOW)
            return
        if name is not None and name not in ctx.config.remotes:
            typer.secho(f"Error: Unknown remote '{name}'", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)

        policy = RefreshPolicy.ALWAYS if force else RefreshPolicy.IF_STALE
        results = refresh_remotes(ctx.config, policy, ctx.logger, only=name)

        if not results:
            typer.echo('Nothing synced')
        for result in results:
            typer.secho(f'✓ {result.remote_name} synced in {result.duration_seconds:.1f}s', fg=typer.colors.GREEN)

    except CcSessionsError as e:
        _fail(e, verbose)


@app.command()
def remotes(verbose: bool = VerboseOption) -> None:
    """Show configured remotes and the state of their caches."""
    try:
        ctx = _load_context(verbose)
        if not ctx.config.remotes:
            typer.echo('No remotes configured')
            return

        now = datetime.now(UTC)
        for name, remote in ctx.config.remotes.items():
            cache_dir = remote_cache_dir(ctx.config.settings, name)
            last_sync = read_last_sync(cache_dir)
            if last_sync is None:
                state = 'never synced'
            else:
                age = format_time_relative(datetime.fromtimestamp(last_sync, tz=UTC), now)
                state = f'synced {age} ago' if age != 'now' else 'synced just now'
            stale = ' (stale)' if is_stale(name, ctx.config.settings) else ''
            typer.echo(f'{name:<16} {ssh_target(remote):<30} {state}{stale}')
            if verbose:
                typer.echo(f'  cache: {cache_dir}')

    except CcSessionsError as e:
        _fail(e, verbose)


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
