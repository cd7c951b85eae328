"""Dependency container: composition root for wiring all layers together."""

from __future__ import annotations

from pathlib import Path

from pocket_whisper.l1_entities.config import AppConfig
from pocket_whisper.l2_use_cases.ports.acoustic_model import AcousticModel
from pocket_whisper.l2_use_cases.ports.model_locator import ModelLocator
from pocket_whisper.l3_interface_adapters.controllers.transcription_controller import TranscriptionController
from pocket_whisper.l3_interface_adapters.gateways.bundled_model_locator import BundledModelLocator
from pocket_whisper.l3_interface_adapters.gateways.model_installer import ModelInstaller
from pocket_whisper.l3_interface_adapters.gateways.paths import MODELS_DIR
from pocket_whisper.l3_interface_adapters.gateways.whispercpp_acoustic_model import WhisperCppAcousticModel
from pocket_whisper.l4_frameworks_and_drivers.infra_config import InfraConfig


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing.

    Building the container builds the controller, which starts the
    background model load immediately.
    """

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        acoustic_model: AcousticModel | None = None,
    ) -> None:
        self.config = config
        self.infra = infra or InfraConfig()

        self.acoustic_model: AcousticModel = acoustic_model or WhisperCppAcousticModel(
            language=config.transcription.language,
            n_threads=config.transcription.n_threads,
        )
        self.locator: ModelLocator = BundledModelLocator.from_config(config.model)
        self.controller = TranscriptionController(
            config=config,
            acoustic_model=self.acoustic_model,
            locator=self.locator,
        )

    @staticmethod
    def model_installer(config: AppConfig) -> ModelInstaller:
        target_dir = Path(config.model.directory).expanduser() if config.model.directory else MODELS_DIR
        return ModelInstaller(config.model.filename, target_dir)
