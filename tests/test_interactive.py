"""
Tests for the interactive picker loop, driven by a scripted picker.
"""

from __future__ import annotations

from collections.abc import Sequence

import attrs
import pytest

from cc_sessions.cli.interactive import SessionPickerItem, action_for, build_header, run_interactive
from cc_sessions.exceptions import InvalidSearchPatternError
from cc_sessions.protocols import PickerItem, PickerResult
from cc_sessions.services.lineage import SessionCatalog
from cc_sessions.services.navigation import (
    CommitSearch,
    DrillLeft,
    DrillRight,
    Escape,
    NavigationState,
    SearchState,
    Select,
)
from tests.helpers import RecordingLogger, make_session, sid

P, A, B, OTHER = sid(1), sid(2), sid(3), sid(4)


@attrs.define
class PickCall:
    ids: list[str]
    header: str
    query: str
    preview_pattern: str | None


class ScriptedPicker:
    """Returns queued results in order and records what it was shown."""

    def __init__(self, results: Sequence[PickerResult]) -> None:
        self.results = list(results)
        self.calls: list[PickCall] = []

    def pick(
        self,
        items: Sequence[PickerItem],
        *,
        header: str,
        query: str = '',
        preview_pattern: str | None = None,
    ) -> PickerResult:
        self.calls.append(PickCall([item.item_id for item in items], header, query, preview_pattern))
        return self.results.pop(0)


@pytest.fixture
def catalog() -> SessionCatalog:
    return SessionCatalog(
        [
            make_session(A, minutes_ago=1, forked_from=P),
            make_session(OTHER, minutes_ago=2),
            make_session(B, minutes_ago=3, forked_from=P),
            make_session(P, minutes_ago=10),
        ]
    )


def no_search(pattern: str) -> frozenset[str]:
    raise AssertionError('search should not run')


def test_enter_selects_session(catalog: SessionCatalog) -> None:
    picker = ScriptedPicker([PickerResult(key='enter', selected_id=P)])

    selected = run_interactive(catalog, picker, no_search)

    assert selected is catalog.get(P)
    assert picker.calls[0].ids == [OTHER, P]


def test_escape_at_top_level_exits(catalog: SessionCatalog) -> None:
    picker = ScriptedPicker([PickerResult(key='esc')])
    assert run_interactive(catalog, picker, no_search) is None


def test_drill_into_forks_and_back(catalog: SessionCatalog) -> None:
    picker = ScriptedPicker(
        [
            PickerResult(key='right', selected_id=OTHER),  # No forks: nothing happens
            PickerResult(key='right', selected_id=P),
            PickerResult(key='left'),
            PickerResult(key='esc'),
        ]
    )

    assert run_interactive(catalog, picker, no_search) is None
    assert [call.ids for call in picker.calls] == [
        [OTHER, P],
        [OTHER, P],
        [P, A, B],
        [OTHER, P],
    ]


def test_search_then_escape_clears_it(catalog: SessionCatalog) -> None:
    searches: list[str] = []

    def search(pattern: str) -> frozenset[str]:
        searches.append(pattern)
        return frozenset({A})

    picker = ScriptedPicker(
        [
            PickerResult(key='ctrl-s', query=' needle '),
            PickerResult(key='esc'),
            PickerResult(key='esc'),
        ]
    )

    assert run_interactive(catalog, picker, search) is None
    assert searches == ['needle']
    assert picker.calls[1].ids == [A]
    assert picker.calls[1].preview_pattern == 'needle'
    assert picker.calls[1].query == ''
    assert 'search: /needle/' in picker.calls[1].header
    assert picker.calls[2].ids == [OTHER, P]
    assert picker.calls[2].preview_pattern is None


def test_abort_exits_from_search_and_focus(catalog: SessionCatalog) -> None:
    searches: list[str] = []

    def search(pattern: str) -> frozenset[str]:
        searches.append(pattern)
        return frozenset({A, B})

    picker = ScriptedPicker(
        [
            PickerResult(key='ctrl-s', query='needle'),
            PickerResult(key='right', selected_id=P),
            PickerResult(key='abort'),
        ]
    )

    assert run_interactive(catalog, picker, search) is None
    assert searches == ['needle']
    assert len(picker.calls) == 3


def test_invalid_search_keeps_state_and_query(catalog: SessionCatalog) -> None:
    def search(pattern: str) -> frozenset[str]:
        raise InvalidSearchPatternError(pattern, 'missing )')

    logger = RecordingLogger()
    picker = ScriptedPicker([PickerResult(key='ctrl-s', query='('), PickerResult(key='esc')])

    assert run_interactive(catalog, picker, search, logger) is None
    assert picker.calls[1].ids == [OTHER, P]
    assert picker.calls[1].query == '('
    assert len(logger.warnings) == 1


def test_blank_search_does_not_run(catalog: SessionCatalog) -> None:
    picker = ScriptedPicker([PickerResult(key='ctrl-s', query='  '), PickerResult(key='esc')])
    assert run_interactive(catalog, picker, no_search) is None


def test_enter_without_selection_continues(catalog: SessionCatalog) -> None:
    picker = ScriptedPicker([PickerResult(key='enter'), PickerResult(key='enter', selected_id=B)])

    assert run_interactive(catalog, picker, no_search) is catalog.get(B)


def test_selecting_a_fork_from_focus(catalog: SessionCatalog) -> None:
    picker = ScriptedPicker(
        [
            PickerResult(key='right', selected_id=P),
            PickerResult(key='enter', selected_id=A),
        ]
    )

    assert run_interactive(catalog, picker, no_search, fork=True) is catalog.get(A)
    assert picker.calls[0].header.startswith('FORK mode')


# ==============================================================================
# Helpers
# ==============================================================================


def test_action_for_keys(catalog: SessionCatalog) -> None:
    assert action_for(PickerResult(key='enter', selected_id=P), catalog) == Select(P)
    assert action_for(PickerResult(key='ctrl-s', query='q'), catalog) == CommitSearch('q')
    assert action_for(PickerResult(key='right', selected_id=P), catalog) == DrillRight(P, has_children=True)
    assert action_for(PickerResult(key='right', selected_id=A), catalog) == DrillRight(A, has_children=False)
    assert action_for(PickerResult(key='right'), catalog) == DrillRight(None, has_children=False)
    assert action_for(PickerResult(key='left'), catalog) == DrillLeft()
    assert action_for(PickerResult(key='esc'), catalog) == Escape()


def test_header_describes_context(catalog: SessionCatalog) -> None:
    assert build_header(NavigationState(), catalog, fork=False).startswith('Select session to resume')
    assert 'forks of' in build_header(NavigationState(focus_stack=(P,)), catalog, fork=False)
    assert '1 matches' in build_header(NavigationState(search=SearchState('x', frozenset({A}))), catalog, False)


def test_picker_item(catalog: SessionCatalog) -> None:
    session = catalog.by_id[P]
    item = SessionPickerItem(session, child_count=2)

    assert item.item_id == P
    assert item.preview_path() == session.filepath
    assert '[+2]' in item.display_text()
