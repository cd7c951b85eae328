"""Gateway: YAML configuration loader. Returns raw mappings; defaults and validation live in L4."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import yaml

from pocket_whisper.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS

log = logging.getLogger('pw.config')


class YamlConfigLoader:
    """Reads the user's config file: an explicit path, else the first default location that exists."""

    def __init__(self, search_paths: Sequence[Path] | None = None) -> None:
        self._search_paths = list(DEFAULT_CONFIG_PATHS if search_paths is None else search_paths)

    def locate(self, config_path: str | None = None) -> Path | None:
        """Return the file that would be read, or None when no config file is present."""
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            return path
        return next((p for p in self._search_paths if p.exists()), None)

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Return the YAML mapping with *overrides* merged in (before Pydantic validation)."""
        path = self.locate(config_path)
        data: dict = {}
        if path is not None:
            log.debug('Reading config from %s', path)
            data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
        if not isinstance(data, dict):
            raise ValueError(f'Config root must be a mapping, got {type(data).__name__}')
        if overrides:
            deep_merge(data, overrides)
        return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
