"""
Operation schemas for service results.

This package contains Pydantic models for results returned by services.
"""

from __future__ import annotations

from cc_sessions.schemas.operations.discovery import (
    DiscoveryFailure,
    DiscoverySummary,
    JsonDatetime,
    LocalSource,
    RemoteSource,
    Session,
    SessionSource,
)

__all__ = [
    # Discovery
    'DiscoveryFailure',
    'DiscoverySummary',
    'JsonDatetime',
    'LocalSource',
    'RemoteSource',
    'Session',
    'SessionSource',
]
