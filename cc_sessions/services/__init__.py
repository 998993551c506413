"""Service layer for session discovery, search and navigation."""

from cc_sessions.services.discovery import SessionDiscoveryService, filter_sessions, find_sessions
from cc_sessions.services.lineage import SessionCatalog, build_fork_tree
from cc_sessions.services.navigation import NavigationState, reduce
from cc_sessions.services.remote import RefreshPolicy, refresh_remotes, sync_remote
from cc_sessions.services.search import compile_search_pattern, search_sessions

__all__ = [
    'NavigationState',
    'RefreshPolicy',
    'SessionCatalog',
    'SessionDiscoveryService',
    'build_fork_tree',
    'compile_search_pattern',
    'filter_sessions',
    'find_sessions',
    'reduce',
    'refresh_remotes',
    'search_sessions',
    'sync_remote',
]
