"""Shared path constants for configuration and model storage."""

from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_path, user_data_path

APP_NAME = 'pocket-whisper'

CONFIG_DIR = user_config_path(APP_NAME)
DATA_DIR = user_data_path(APP_NAME)
MODELS_DIR = DATA_DIR / 'models'

DEFAULT_CONFIG_PATHS = [
    CONFIG_DIR / 'config.yaml',
    CONFIG_DIR / 'config.yml',
]


def local_models_dir() -> Path:
    """``./models`` relative to the current working directory, the last fallback."""
    return Path.cwd() / 'models'
