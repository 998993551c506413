"""
Fork lineage over a flat session list.

Forks carry their parent's ID by value (`forked_from`). Nothing holds a
pointer to another session: the catalog builds an ID lookup table and a
one-level parent -> children index, and ancestry is rebuilt on demand by
repeated lookups. Both are projections of one discovery run, rebuilt every
time.

A fork whose parent is not in the current set (deleted, filtered out, or on
another source) is an orphan and is treated as a root.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from cc_sessions.schemas.operations.discovery import Session
from cc_sessions.services.navigation import NavigationState

__all__ = [
    'SessionCatalog',
    'build_fork_tree',
]


def build_fork_tree(sessions: Iterable[Session]) -> dict[str, list[Session]]:
    """
    Map each parent ID to its direct children, newest first.

    Only sessions that name a parent appear as children; a session with no
    children has no key.
    """
    children: defaultdict[str, list[Session]] = defaultdict(list)
    for session in sessions:
        if session.forked_from is not None:
            children[session.forked_from].append(session)

    for siblings in children.values():
        siblings.sort(key=lambda s: s.modified, reverse=True)
    return dict(children)


class SessionCatalog:
    """
    Lookup table plus fork index over one discovery result.

    Preserves the input order (newest first) for every listing it returns.
    """

    def __init__(self, sessions: Sequence[Session]) -> None:
        self.sessions: Sequence[Session] = tuple(sessions)
        self.by_id: Mapping[str, Session] = {s.id: s for s in self.sessions}
        self.children: Mapping[str, list[Session]] = build_fork_tree(self.sessions)

    def __len__(self) -> int:
        return len(self.sessions)

    def get(self, session_id: str) -> Session | None:
        return self.by_id.get(session_id)

    def children_of(self, session_id: str) -> Sequence[Session]:
        return self.children.get(session_id, [])

    def has_children(self, session_id: str) -> bool:
        return bool(self.children.get(session_id))

    def is_root(self, session: Session) -> bool:
        """No parent, or a parent absent from this catalog (orphaned fork)."""
        return session.forked_from is None or session.forked_from not in self.by_id

    def roots(self) -> list[Session]:
        return [s for s in self.sessions if self.is_root(s)]

    def ancestry(self, session_id: str, max_depth: int = 10) -> list[str]:
        """Get ancestry chain [root, ..., parent, self].

        Follows parent links until:
        - Reaching a session with no parent, or a parent not in the catalog
        - Reaching max_depth (cycle protection)

        Args:
            session_id: Starting session ID
            max_depth: Maximum depth to prevent infinite loops

        Returns:
            List of session IDs from root to self (empty if session_id is unknown)
        """
        ancestry: list[str] = []
        current = self.by_id.get(session_id)
        depth = 0

        while current is not None and depth < max_depth:
            ancestry.append(current.id)
            if current.forked_from is None:
                break
            current = self.by_id.get(current.forked_from)
            depth += 1

        ancestry.reverse()
        return ancestry

    def visible_sessions(self, state: NavigationState) -> list[Session]:
        """
        Sessions the picker should show for a navigation state.

        - Search active: exactly the matched sessions
        - Focused: the focused session, then its direct children
        - Otherwise: every root
        """
        if state.search is not None:
            matched = state.search.matched_ids
            return [s for s in self.sessions if s.id in matched]

        if state.focus is not None:
            focused = self.by_id.get(state.focus)
            children = list(self.children_of(state.focus))
            return [focused, *children] if focused is not None else children

        return self.roots()
