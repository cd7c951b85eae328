"""Gateway: bundled model locator. Implements ModelLocator port with stat-then-fallback."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from pocket_whisper.l1_entities.config import ModelConfig
from pocket_whisper.l1_entities.errors import ModelResolutionError
from pocket_whisper.l3_interface_adapters.gateways.paths import MODELS_DIR, local_models_dir

log = logging.getLogger('pw.locator')


class BundledModelLocator:
    """Finds the model file: primary directory first, then each fallback directory in order."""

    def __init__(
        self,
        filename: str,
        primary_dir: Path,
        fallback_dirs: Sequence[Path] = (),
    ) -> None:
        self._filename = filename
        self._primary_dir = primary_dir
        self._fallback_dirs = list(fallback_dirs)

    @classmethod
    def from_config(cls, config: ModelConfig) -> BundledModelLocator:
        primary = Path(config.directory).expanduser() if config.directory else MODELS_DIR
        fallbacks = [Path(p).expanduser() for p in config.search_paths]
        fallbacks.append(local_models_dir())
        return cls(config.filename, primary, fallbacks)

    @property
    def expected_path(self) -> str:
        if Path(self._filename).is_absolute():
            return self._filename
        return str((self._primary_dir / self._filename).absolute())

    def candidates(self) -> list[Path]:
        """Every location that is checked, in search order."""
        if Path(self._filename).is_absolute():
            return [Path(self._filename)]
        dirs = [self._primary_dir, *self._fallback_dirs]
        return [d / self._filename for d in dirs]

    def resolve(self) -> str:
        for candidate in self.candidates():
            if candidate.is_file():
                resolved = str(candidate.absolute())
                log.info('Model path: %s', resolved)
                return resolved
            log.debug('Model not found at %s', candidate)

        searched = ', '.join(str(c) for c in self.candidates())
        raise ModelResolutionError(f'Model file not found: {self._filename} (searched: {searched})')
