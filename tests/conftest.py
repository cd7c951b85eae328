"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import threading
from pathlib import Path

import numpy as np
import pytest

from pocket_whisper.l1_entities.config import AppConfig
from pocket_whisper.l1_entities.errors import ModelResolutionError
from pocket_whisper.l2_use_cases.model_lifecycle_use_case import ModelLifecycle
from pocket_whisper.l4_frameworks_and_drivers.infra_config import build_app_config

# --- Protocol-conforming Fakes ---


class FakeAcousticModel:
    """Fake acoustic model for L2/L3 tests.

    ``gate`` lets a test hold the background load open until it calls
    ``gate.set()``; by default loads finish immediately.
    """

    def __init__(
        self,
        text: str = 'hello world',
        load_ok: bool = True,
        load_error: Exception | None = None,
        infer_error: Exception | None = None,
        block_load: bool = False,
    ):
        self._text = text
        self._load_ok = load_ok
        self._load_error = load_error
        self._infer_error = infer_error
        self.gate = threading.Event()
        if not block_load:
            self.gate.set()
        self.load_calls: list[str] = []
        self.infer_calls: list[np.ndarray] = []
        self.release_calls = 0

    def load(self, model_path: str) -> bool:
        self.load_calls.append(model_path)
        self.gate.wait(timeout=5)
        if self._load_error is not None:
            raise self._load_error
        return self._load_ok

    def infer(self, samples: np.ndarray) -> str:
        self.infer_calls.append(samples.copy())
        if self._infer_error is not None:
            raise self._infer_error
        return self._text

    def release(self) -> None:
        self.release_calls += 1

    def set_text(self, text: str) -> None:
        self._text = text


class FakeModelLocator:
    """Fake model locator. Returns a fixed path, or raises like a missing model."""

    def __init__(self, path: str = '/models/ggml-base-q8_0.bin', missing: bool = False):
        self._path = path
        self._missing = missing
        self.resolve_calls = 0

    @property
    def expected_path(self) -> str:
        return self._path

    def resolve(self) -> str:
        self.resolve_calls += 1
        if self._missing:
            raise ModelResolutionError(f'Model file not found: {self._path}')
        return self._path


# --- Helpers ---


def pcm_bytes(values: list[int]) -> bytes:
    """Encode int16 *values* as little-endian PCM bytes."""
    return np.asarray(values, dtype='<i2').tobytes()


def ready_lifecycle(model: FakeAcousticModel, path: str = '/models/m.bin') -> ModelLifecycle:
    """Return a lifecycle whose background load has already completed."""
    lifecycle = ModelLifecycle(model, path)
    lifecycle.begin_load()
    assert lifecycle.wait_until_settled(timeout=5)
    return lifecycle


# --- Standard Fixtures ---


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def fake_model() -> FakeAcousticModel:
    return FakeAcousticModel()


@pytest.fixture
def fake_locator() -> FakeModelLocator:
    return FakeModelLocator()


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    p = tmp_path / 'models' / 'ggml-base-q8_0.bin'
    p.parent.mkdir()
    p.write_bytes(b'ggml' + b'\x00' * 64)
    return p


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    content = """\
model:
  filename: "ggml-small-q8_0.bin"
  search_paths:
    - "/opt/models"
  load_timeout: 30
transcription:
  language: "zh"
  n_threads: 2
  confidence: 0.5
  chunk_duration: 10.0
  silence_threshold: 0.02
"""
    p = tmp_path / 'config.yaml'
    p.write_text(content, encoding='utf-8')
    return p
