"""
Schema definitions for cc-sessions.

This package contains Pydantic models for:
- operations: Discovery results (sessions, their sources, partial failures)
"""

from __future__ import annotations

from cc_sessions.base_model import StrictModel
from cc_sessions.schemas.operations.discovery import JsonDatetime, Session, SessionSource

__all__ = [
    'JsonDatetime',
    'Session',
    'SessionSource',
    'StrictModel',
]
