"""
Navigation state machine for the interactive picker.

A pure reducer: reduce(state, action) -> (new_state, effect). It performs no
I/O. Effects are the only way it asks its caller for follow-up work
(running a search, resuming a session, exiting).

Esc priority: clear search, then clear focus, then exit.
"""

from __future__ import annotations

from collections.abc import Iterable

import attrs

__all__ = [
    'Action',
    'ApplySearchResults',
    'apply_all',
    'CommitSearch',
    'Continue',
    'DrillLeft',
    'DrillRight',
    'Effect',
    'Escape',
    'Exit',
    'NavigationState',
    'RunSearch',
    'SearchState',
    'Select',
    'SelectSession',
    'reduce',
]


# ==============================================================================
# State
# ==============================================================================


@attrs.define(frozen=True)
class SearchState:
    """An applied transcript search."""

    pattern: str
    matched_ids: frozenset[str] = attrs.field(converter=frozenset)


@attrs.define(frozen=True)
class NavigationState:
    """Search overlay plus the stack of sessions drilled into (last = current)."""

    search: SearchState | None = None
    focus_stack: tuple[str, ...] = ()

    @property
    def focus(self) -> str | None:
        return self.focus_stack[-1] if self.focus_stack else None


# ==============================================================================
# Actions
# ==============================================================================


@attrs.define(frozen=True)
class Escape:
    pass


@attrs.define(frozen=True)
class CommitSearch:
    query: str


@attrs.define(frozen=True)
class ApplySearchResults:
    pattern: str
    matched_ids: frozenset[str] = attrs.field(converter=frozenset)


@attrs.define(frozen=True)
class DrillRight:
    selected_id: str | None
    has_children: bool


@attrs.define(frozen=True)
class DrillLeft:
    pass


@attrs.define(frozen=True)
class Select:
    selected_id: str | None


Action = Escape | CommitSearch | ApplySearchResults | DrillRight | DrillLeft | Select


# ==============================================================================
# Effects
# ==============================================================================


@attrs.define(frozen=True)
class Continue:
    pass


@attrs.define(frozen=True)
class Exit:
    pass


@attrs.define(frozen=True)
class RunSearch:
    """Caller must run the search, then apply ApplySearchResults."""

    pattern: str


@attrs.define(frozen=True)
class SelectSession:
    """Caller resumes (or forks) this session; the loop ends."""

    session_id: str


Effect = Continue | Exit | RunSearch | SelectSession


# ==============================================================================
# Reducer
# ==============================================================================


def reduce(state: NavigationState, action: Action) -> tuple[NavigationState, Effect]:
    """Apply one user action."""
    match action:
        case Escape():
            if state.search is not None:
                return attrs.evolve(state, search=None), Continue()
            if state.focus_stack:
                return attrs.evolve(state, focus_stack=()), Continue()
            return state, Exit()

        case CommitSearch(query=query):
            pattern = query.strip()
            if not pattern:
                return state, Continue()
            return state, RunSearch(pattern=pattern)

        case ApplySearchResults(pattern=pattern, matched_ids=matched_ids):
            return attrs.evolve(state, search=SearchState(pattern, matched_ids)), Continue()

        case DrillRight(selected_id=selected_id, has_children=has_children):
            if selected_id is None or not has_children or selected_id == state.focus:
                return state, Continue()
            return attrs.evolve(state, focus_stack=(*state.focus_stack, selected_id)), Continue()

        case DrillLeft():
            return attrs.evolve(state, focus_stack=state.focus_stack[:-1]), Continue()

        case Select(selected_id=selected_id):
            if selected_id is None:
                return state, Continue()
            return state, SelectSession(session_id=selected_id)

        case _:
            raise ValueError(f'Unknown navigation action: {type(action).__name__}')


def apply_all(state: NavigationState, actions: Iterable[Action]) -> tuple[NavigationState, list[Effect]]:
    """Fold a sequence of actions, collecting each effect."""
    effects: list[Effect] = []
    for action in actions:
        state, effect = reduce(state, action)
        effects.append(effect)
    return state, effects
