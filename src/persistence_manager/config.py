# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Configuration models for stores and manager timings.

These Pydantic models are the only configuration surface of the package.
They validate on construction and can be loaded from JSON with
``model_validate_json``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from persistence_manager.exceptions import PersistenceConfigError
from persistence_manager.stores import DocumentStore, InMemoryDocumentStore, SQLiteDocumentStore

DEBOUNCE_SECONDS = 1.0
SETTLE_SECONDS = 0.1
GRACE_SECONDS = 0.05


class StoreConfig(BaseModel):
    """Storage backend selection.

    Attributes:
        type: Store type ("memory" or "sqlite")
        path: Path to SQLite database file (for sqlite type)
    """

    type: Literal["memory", "sqlite"] = "memory"
    path: str = ""


class PersistenceSettings(BaseModel):
    """Timing constants of a :class:`PersistenceManager`.

    Fixed for the lifetime of a manager; the defaults are what production
    uses, tests pass shorter ones.

    Attributes:
        debounce_seconds: Quiet period before an autosave fires
        settle_seconds: Delay after a load resolves before autosave re-arms
        grace_seconds: Wait in ``force_save`` when the flush yields no task
    """

    model_config = ConfigDict(frozen=True)

    debounce_seconds: float = Field(default=DEBOUNCE_SECONDS, gt=0)
    settle_seconds: float = Field(default=SETTLE_SECONDS, gt=0)
    grace_seconds: float = Field(default=GRACE_SECONDS, gt=0)


def create_store(config: StoreConfig) -> DocumentStore:
    """Create a store from configuration.

    Args:
        config: Store configuration

    Returns:
        DocumentStore instance

    Raises:
        PersistenceConfigError: If the sqlite store has no path
    """
    if config.type == "sqlite":
        if not config.path:
            raise PersistenceConfigError("SQLite store requires 'path' configuration")
        return SQLiteDocumentStore(config.path)
    return InMemoryDocumentStore()
