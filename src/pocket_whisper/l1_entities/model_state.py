"""Model readiness state, handle and status snapshot."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pydantic import BaseModel, Field


class ModelState(enum.Enum):
    UNLOADED = 'unloaded'
    LOADING = 'loading'
    READY = 'ready'
    FAILED = 'failed'


@dataclass
class ModelHandle:
    """The loaded acoustic model as seen by the lifecycle manager.

    ``path`` is fixed at construction. ``released`` marks the handle as spent:
    once the model has been released the handle never loads again.
    """

    path: str
    state: ModelState = ModelState.UNLOADED
    released: bool = False
    error: str = ''


class ModelStatus(BaseModel):
    """Point-in-time view of the model, safe to hand to callers."""

    is_loaded: bool
    model_path: str
    state: ModelState = Field(description='Lifecycle state at the time of the query')
