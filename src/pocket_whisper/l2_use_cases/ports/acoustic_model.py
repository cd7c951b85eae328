"""Port: opaque acoustic model (weights, inference kernels, tokenizer)."""

from __future__ import annotations

from typing import Protocol

import numpy as np


class AcousticModel(Protocol):
    """Abstract inference capability. Zero framework types leak through."""

    def load(self, model_path: str) -> bool:
        """Load the model file. Returns False (or raises) when it cannot be used."""
        ...

    def infer(self, samples: np.ndarray) -> str:
        """Run inference on a normalized mono float32 buffer at 16 kHz."""
        ...

    def release(self) -> None:
        """Free the underlying model resources."""
        ...
