"""Port: model file location."""

from __future__ import annotations

from typing import Protocol


class ModelLocator(Protocol):
    """Abstract model locator: maps the bundled model to a readable local path."""

    @property
    def expected_path(self) -> str:
        """Primary location the model is expected at, whether or not it exists."""
        ...

    def resolve(self) -> str:
        """Return an absolute path to an existing model file. Raises on failure."""
        ...
