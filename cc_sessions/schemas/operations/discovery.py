"""
Discovery operation schemas.

Models for sessions materialized by discovery and for the multi-source
result. Sessions are rebuilt from disk on every run and never mutated.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal

import pydantic

from cc_sessions.base_model import StrictModel

# Pydantic-enhanced datetime (allows string→datetime conversion when loading dumps)
JsonDatetime = Annotated[datetime, pydantic.Field(strict=False)]


# ==============================================================================
# Sources
# ==============================================================================


class LocalSource(StrictModel):
    """Session found under the local projects root."""

    kind: Literal['local'] = 'local'

    @property
    def name(self) -> str:
        return 'local'


class RemoteSource(StrictModel):
    """Session found in the local cache mirroring a named remote machine."""

    kind: Literal['remote'] = 'remote'
    name: str  # Key in the remotes config table
    host: str  # SSH host (alias from ~/.ssh/config or raw hostname/IP)
    user: str | None = None

    @property
    def ssh_target(self) -> str:
        """SSH target string: 'user@host' or just 'host'."""
        return f'{self.user}@{self.host}' if self.user else self.host


SessionSource = Annotated[LocalSource | RemoteSource, pydantic.Field(discriminator='kind')]


# ==============================================================================
# Session
# ==============================================================================


class Session(StrictModel):
    """
    One discovered conversation transcript.

    Field ordering:
    - Identity (who, from where)
    - Location (project, file)
    - Temporal (filesystem timestamps)
    - Display (first message, summary, custom title)
    - Metrics and lineage
    """

    # Identity
    id: str  # Filename stem, canonical UUID shape
    source: SessionSource

    # Location
    project: str  # Display name derived from project_path or the directory name
    project_path: str  # cwd recorded in the transcript, may be empty
    filepath: Path

    # Temporal
    created: JsonDatetime
    modified: JsonDatetime

    # Display
    first_message: str | None = None  # Normalized, truncated first real prompt
    summary: str | None = None  # From the trailing window only
    name: str | None = None  # Latest custom title from /rename

    # Metrics and lineage
    turn_count: int = pydantic.Field(default=0, ge=0)
    forked_from: str | None = None  # Parent session id, resolved through a catalog lookup

    # Lowercase transcript text for in-memory filtering (not shown, not dumped)
    search_text: str = pydantic.Field(default='', repr=False, exclude=True)

    @property
    def source_name(self) -> str:
        return self.source.name

    @property
    def is_remote(self) -> bool:
        return isinstance(self.source, RemoteSource)

    @property
    def is_fork(self) -> bool:
        return self.forked_from is not None


# ==============================================================================
# Multi-source result
# ==============================================================================


class DiscoveryFailure(StrictModel):
    """A source that could not be read; other sources were still processed."""

    source_name: str
    reason: str


class DiscoverySummary(StrictModel):
    """Top-level result of multi-source discovery or search."""

    sessions: Sequence[Session]  # Sorted by modified, newest first
    failures: Sequence[DiscoveryFailure] = ()

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
