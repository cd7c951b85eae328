"""Infrastructure provider configs. Lives in L4, not domain."""

from __future__ import annotations

import copy

from pydantic import BaseModel, Field

from pocket_whisper.l1_entities.config import AppConfig
from pocket_whisper.l3_interface_adapters.gateways.model_installer import WHISPER_CPP_REPO
from pocket_whisper.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'model': {
        'filename': 'ggml-base-q8_0.bin',
        'directory': None,
        'search_paths': [],
        'load_timeout': 120.0,
    },
    'transcription': {
        'language': 'auto',
        'n_threads': 4,
        'confidence': 0.8,
        'chunk_duration': 30.0,
        'silence_threshold': 0.01,
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


class HuggingFaceProviderConfig(BaseModel):
    repo_id: str = WHISPER_CPP_REPO


class InfraConfig(BaseModel):
    """Groups all provider-specific settings outside the domain layer."""

    huggingface: HuggingFaceProviderConfig = Field(default_factory=HuggingFaceProviderConfig)
