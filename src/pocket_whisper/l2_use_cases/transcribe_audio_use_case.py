"""Use case: transcribe one audio request. Readiness gate, decode, normalize, infer."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

import numpy as np

from pocket_whisper.l1_entities.audio_constants import SAMPLE_RATE
from pocket_whisper.l1_entities.errors import (
    InferenceError,
    MalformedAudioError,
    ModelNotLoadedError,
    TranscriptionError,
)
from pocket_whisper.l1_entities.transcription import DEFAULT_CONFIDENCE, TranscriptionResult
from pocket_whisper.l2_use_cases.model_lifecycle_use_case import ModelLifecycle
from pocket_whisper.l2_use_cases.utils.audio_normalizer import (
    decode_base64_pcm,
    decode_pcm16,
    peak_normalize,
    samples_to_float,
)

log = logging.getLogger('pw.transcribe')


class TranscribeAudioUseCase:
    """Runs one request to completion on the calling thread.

    The three entry points differ only in how the raw input is decoded; all of
    them converge on ``_run()``. Only ``TranscriptionError`` subclasses ever
    leave this class.
    """

    def __init__(self, lifecycle: ModelLifecycle, confidence: float = DEFAULT_CONFIDENCE) -> None:
        self._lifecycle = lifecycle
        self._confidence = confidence

    def transcribe_samples(self, samples: Sequence[float] | np.ndarray) -> TranscriptionResult:
        """Transcribe an already-float sample sequence."""
        return self._run(lambda: samples_to_float(samples))

    def transcribe_pcm(self, data: bytes) -> TranscriptionResult:
        """Transcribe signed 16-bit little-endian PCM bytes."""
        return self._run(lambda: decode_pcm16(data))

    def transcribe_base64(self, encoded: str | bytes) -> TranscriptionResult:
        """Transcribe base64-encoded 16-bit little-endian PCM."""
        return self._run(lambda: decode_base64_pcm(encoded))

    def _run(self, decode: Callable[[], np.ndarray]) -> TranscriptionResult:
        # Gate first: a non-ready model must not touch the decoder or the model.
        if not self._lifecycle.is_ready():
            raise ModelNotLoadedError()

        try:
            buffer = decode()
            if buffer.size == 0:
                raise MalformedAudioError('Audio buffer is empty')
            normalized = peak_normalize(buffer)
            model = self._lifecycle.model
            log.info('Transcribing %d samples (%.2fs)', len(normalized), len(normalized) / SAMPLE_RATE)
            text = model.infer(normalized)
        except TranscriptionError as exc:
            log.warning('Transcription rejected: %s: %s', exc.code, exc)
            raise
        except Exception as exc:
            log.error('Transcription failed', exc_info=True)
            raise InferenceError(f'Failed to transcribe audio: {exc}') from exc

        text = (text or '').strip()
        log.debug('Transcription complete: %d chars', len(text))
        return TranscriptionResult(text=text, confidence=self._confidence)
