"""
Shared Pydantic base model for strict validation.

All Pydantic models in the application should inherit from StrictModel.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base model with strict validation settings."""

    model_config = ConfigDict(
        extra='forbid',  # Raise error on unexpected fields
        strict=True,  # Strict type validation
        frozen=True,  # Immutable (cannot modify after creation)
    )


class ConfigModel(BaseModel):
    """Base model for user-authored config files.

    Same guarantees as StrictModel except strict type validation, so that
    TOML integers and strings coerce the way users expect.
    """

    model_config = ConfigDict(
        extra='forbid',  # Typos in config keys fail loudly
        frozen=True,
    )
