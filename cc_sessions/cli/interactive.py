"""
Interactive picker loop.

Single-threaded: each iteration blocks on one picker call, turns the result
into a navigation action, applies the reducer, and handles the effect.
Cancellation only happens between iterations.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import attrs

from cc_sessions.exceptions import InvalidSearchPatternError
from cc_sessions.protocols import LoggerProtocol, NullLogger, Picker, PickerResult
from cc_sessions.schemas.operations.discovery import Session
from cc_sessions.services.display import format_session_row
from cc_sessions.services.lineage import SessionCatalog
from cc_sessions.services.navigation import (
    Action,
    ApplySearchResults,
    CommitSearch,
    Continue,
    DrillLeft,
    DrillRight,
    Escape,
    Exit,
    NavigationState,
    RunSearch,
    Select,
    SelectSession,
    reduce,
)

__all__ = ['SessionPickerItem', 'action_for', 'build_header', 'run_interactive']

# Runs a transcript search and returns the matching session IDs
SearchFn = Callable[[str], frozenset[str]]


@attrs.define(frozen=True)
class SessionPickerItem:
    """PickerItem for a session row."""

    session: Session
    child_count: int = 0

    @property
    def item_id(self) -> str:
        return self.session.id

    def display_text(self) -> str:
        return format_session_row(self.session, self.child_count)

    def preview_path(self) -> Path:
        return self.session.filepath


def action_for(result: PickerResult, catalog: SessionCatalog) -> Action:
    """Translate a picker key press into a navigation action."""
    match result.key:
        case 'enter':
            return Select(selected_id=result.selected_id)
        case 'ctrl-s':
            return CommitSearch(query=result.query)
        case 'right':
            has_children = result.selected_id is not None and catalog.has_children(result.selected_id)
            return DrillRight(selected_id=result.selected_id, has_children=has_children)
        case 'left':
            return DrillLeft()
        case _:
            return Escape()


def build_header(state: NavigationState, catalog: SessionCatalog, fork: bool) -> str:
    """Header line describing mode and navigation context."""
    mode = 'FORK mode │ Select session to fork' if fork else 'Select session to resume'
    parts = [mode]
    if state.search is not None:
        parts.append(f'search: /{state.search.pattern}/ ({len(state.search.matched_ids)} matches, esc clears)')
    elif state.focus is not None:
        depth = len(catalog.ancestry(state.focus))
        parts.append(f'forks of {state.focus[:8]} (depth {depth}, ← back, esc top)')
    parts.append('ctrl-s search │ → forks')
    return ' │ '.join(parts)


def run_interactive(
    catalog: SessionCatalog,
    picker: Picker,
    search: SearchFn,
    logger: LoggerProtocol | None = None,
    fork: bool = False,
) -> Session | None:
    """
    Drive the picker until a session is chosen or the user exits.

    Args:
        catalog: All discovered sessions (roots and forks)
        picker: Blocking picker implementation
        search: Transcript search returning matching IDs
        logger: Receives invalid-search warnings
        fork: Only changes the header text

    Returns:
        The selected Session, or None if the user exited
    """
    logger = logger or NullLogger()
    state = NavigationState()
    query = ''

    while True:
        items = [SessionPickerItem(s, len(catalog.children_of(s.id))) for s in catalog.visible_sessions(state)]
        result = picker.pick(
            items,
            header=build_header(state, catalog, fork),
            query=query,
            preview_pattern=state.search.pattern if state.search is not None else None,
        )
        if result.key == 'abort':
            return None
        query = result.query if result.key == 'ctrl-s' else ''

        state, effect = reduce(state, action_for(result, catalog))

        match effect:
            case Continue():
                continue
            case Exit():
                return None
            case RunSearch(pattern=pattern):
                try:
                    matched = search(pattern)
                except InvalidSearchPatternError as e:
                    logger.warning(str(e))
                    continue
                state, _ = reduce(state, ApplySearchResults(pattern=pattern, matched_ids=matched))
                query = ''
            case SelectSession(session_id=session_id):
                session = catalog.get(session_id)
                if session is None:
                    logger.warning(f'Selected session {session_id} is no longer in the catalog')
                    continue
                return session
