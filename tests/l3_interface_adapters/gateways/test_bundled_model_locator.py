"""Tests for BundledModelLocator gateway: stat-then-fallback model discovery."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from pocket_whisper.l1_entities.config import ModelConfig
from pocket_whisper.l1_entities.errors import ModelResolutionError
from pocket_whisper.l3_interface_adapters.gateways.bundled_model_locator import BundledModelLocator

NAME = 'ggml-base-q8_0.bin'


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b'ggml')
    return path


class TestResolve:
    def test_primary_wins(self, tmp_path: Path):
        primary = _touch(tmp_path / 'primary' / NAME)
        _touch(tmp_path / 'fallback' / NAME)
        locator = BundledModelLocator(NAME, tmp_path / 'primary', [tmp_path / 'fallback'])
        assert locator.resolve() == str(primary.absolute())

    def test_falls_back_in_order(self, tmp_path: Path):
        second = _touch(tmp_path / 'b' / NAME)
        _touch(tmp_path / 'c' / NAME)
        locator = BundledModelLocator(NAME, tmp_path / 'primary', [tmp_path / 'a', tmp_path / 'b', tmp_path / 'c'])
        assert locator.resolve() == str(second.absolute())

    def test_directory_with_model_name_is_skipped(self, tmp_path: Path):
        (tmp_path / 'primary' / NAME).mkdir(parents=True)
        fallback = _touch(tmp_path / 'fallback' / NAME)
        locator = BundledModelLocator(NAME, tmp_path / 'primary', [tmp_path / 'fallback'])
        assert locator.resolve() == str(fallback.absolute())

    def test_not_found_lists_candidates(self, tmp_path: Path):
        locator = BundledModelLocator(NAME, tmp_path / 'primary', [tmp_path / 'fallback'])
        with pytest.raises(ModelResolutionError, match='not found') as exc_info:
            locator.resolve()
        assert 'fallback' in str(exc_info.value)

    def test_absolute_filename_used_directly(self, tmp_path: Path):
        model = _touch(tmp_path / 'elsewhere' / 'custom.bin')
        locator = BundledModelLocator(str(model), tmp_path / 'primary', [tmp_path / 'fallback'])
        assert locator.candidates() == [model]
        assert locator.resolve() == str(model)

    def test_absolute_filename_missing(self, tmp_path: Path):
        locator = BundledModelLocator(str(tmp_path / 'nope.bin'), tmp_path)
        with pytest.raises(ModelResolutionError):
            locator.resolve()


class TestExpectedPath:
    def test_points_into_primary_dir(self, tmp_path: Path):
        locator = BundledModelLocator(NAME, tmp_path / 'primary')
        assert locator.expected_path == str((tmp_path / 'primary' / NAME).absolute())

    def test_absolute_filename_unchanged(self, tmp_path: Path):
        target = str(tmp_path / 'm.bin')
        assert BundledModelLocator(target, tmp_path / 'x').expected_path == target


class TestFromConfig:
    def test_uses_configured_directory_and_search_paths(self, tmp_path: Path):
        cfg = ModelConfig(
            filename=NAME,
            directory=str(tmp_path / 'primary'),
            search_paths=[str(tmp_path / 'extra')],
            load_timeout=10,
        )
        with patch(
            'pocket_whisper.l3_interface_adapters.gateways.bundled_model_locator.local_models_dir',
            return_value=tmp_path / 'cwd_models',
        ):
            locator = BundledModelLocator.from_config(cfg)

        assert locator.candidates() == [
            tmp_path / 'primary' / NAME,
            tmp_path / 'extra' / NAME,
            tmp_path / 'cwd_models' / NAME,
        ]

    def test_defaults_to_data_dir(self, tmp_path: Path):
        cfg = ModelConfig(filename=NAME, load_timeout=10)
        with patch(
            'pocket_whisper.l3_interface_adapters.gateways.bundled_model_locator.MODELS_DIR',
            tmp_path / 'data_models',
        ):
            locator = BundledModelLocator.from_config(cfg)
        assert locator.candidates()[0] == tmp_path / 'data_models' / NAME
