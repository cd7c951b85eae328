"""TranscriptionController: module facade that kicks off the model load and hands out completion handles."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future

import numpy as np

from pocket_whisper.l1_entities.config import AppConfig
from pocket_whisper.l1_entities.errors import InferenceError, ModelNotLoadedError, TranscriptionError
from pocket_whisper.l1_entities.model_state import ModelStatus
from pocket_whisper.l1_entities.transcription import TranscriptionOutcome, TranscriptionResult
from pocket_whisper.l2_use_cases.model_lifecycle_use_case import ModelLifecycle
from pocket_whisper.l2_use_cases.ports.acoustic_model import AcousticModel
from pocket_whisper.l2_use_cases.ports.model_locator import ModelLocator
from pocket_whisper.l2_use_cases.transcribe_audio_use_case import TranscribeAudioUseCase

log = logging.getLogger('pw.controller')


class TranscriptionController:
    """Bridges the lifecycle and transcription use cases to a non-blocking caller.

    Every ``transcribe_*`` call returns a ``Future`` right away. The future is
    resolved exactly once with a ``TranscriptionOutcome``. Failures are
    carried as values, never set as exceptions. Requests are not queued: each
    accepted request runs on its own short-lived thread.
    """

    def __init__(
        self,
        config: AppConfig,
        acoustic_model: AcousticModel,
        locator: ModelLocator,
    ) -> None:
        self._config = config
        self._torn_down = False

        try:
            model_path = locator.resolve()
        except Exception as exc:
            log.error('Model file unavailable, transcription disabled: %s', exc)
            model_path = None

        self._lifecycle = ModelLifecycle(acoustic_model, model_path or locator.expected_path)
        self._use_case = TranscribeAudioUseCase(self._lifecycle, confidence=config.transcription.confidence)

        if model_path is not None:
            self._lifecycle.begin_load()

    @property
    def lifecycle(self) -> ModelLifecycle:
        return self._lifecycle

    def get_status(self) -> ModelStatus:
        return self._lifecycle.status()

    def wait_until_ready(self, timeout: float | None = None) -> bool:
        """Block until the background load settles. True only when the model is ready."""
        if timeout is None:
            timeout = self._config.model.load_timeout
        self._lifecycle.wait_until_settled(timeout)
        return self._lifecycle.is_ready()

    def transcribe_samples(self, samples: Sequence[float] | np.ndarray) -> Future[TranscriptionOutcome]:
        return self._submit(lambda: self._use_case.transcribe_samples(samples))

    def transcribe_pcm(self, data: bytes) -> Future[TranscriptionOutcome]:
        return self._submit(lambda: self._use_case.transcribe_pcm(data))

    def transcribe_base64(self, encoded: str | bytes) -> Future[TranscriptionOutcome]:
        return self._submit(lambda: self._use_case.transcribe_base64(encoded))

    async def transcribe_samples_async(self, samples: Sequence[float] | np.ndarray) -> TranscriptionOutcome:
        return await asyncio.wrap_future(self.transcribe_samples(samples))

    async def transcribe_base64_async(self, encoded: str | bytes) -> TranscriptionOutcome:
        return await asyncio.wrap_future(self.transcribe_base64(encoded))

    def teardown(self) -> None:
        """Host teardown hook: release the model once. Later calls do nothing."""
        if self._torn_down:
            return
        self._torn_down = True
        log.info('Tearing down transcription module')
        self._lifecycle.release()

    def _submit(self, work: Callable[[], TranscriptionResult]) -> Future[TranscriptionOutcome]:
        future: Future[TranscriptionOutcome] = Future()
        future.set_running_or_notify_cancel()

        if not self._lifecycle.is_ready():
            log.warning('Rejecting transcription request: model state is %s', self._lifecycle.state.value)
            future.set_result(TranscriptionOutcome(error=ModelNotLoadedError()))
            return future

        thread = threading.Thread(target=_resolve, args=(future, work), name='pw-transcribe', daemon=True)
        thread.start()
        return future


def _resolve(future: Future[TranscriptionOutcome], work: Callable[[], TranscriptionResult]) -> None:
    """Thread body: run *work* and resolve *future* with its outcome."""
    try:
        outcome = TranscriptionOutcome(result=work())
    except TranscriptionError as exc:
        outcome = TranscriptionOutcome(error=exc)
    except Exception as exc:  # never leave the handle pending
        log.error('Unexpected transcription fault', exc_info=True)
        outcome = TranscriptionOutcome(error=InferenceError(f'Failed to transcribe audio: {exc}'))
    future.set_result(outcome)
