"""Audio normalizer: raw samples or PCM bytes in, peak-normalized mono float32 out.

Pure functions only. Every decoder returns a fresh ``np.float32`` buffer and
never mutates its input.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Sequence

import numpy as np

from pocket_whisper.l1_entities.audio_constants import PCM_SAMPLE_WIDTH, PCM_SCALE, PEAK_TARGET
from pocket_whisper.l1_entities.errors import MalformedAudioError


_FLOAT32_MAX = float(np.finfo(np.float32).max)


def samples_to_float(samples: Sequence[float] | np.ndarray) -> np.ndarray:
    """Cast already-float samples (Path A) into a mono float32 buffer."""
    try:
        wide = np.asarray(samples, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MalformedAudioError(f'Audio samples must be numeric: {exc}') from exc

    if wide.ndim != 1:
        raise MalformedAudioError(f'Audio samples must be a flat mono sequence, got {wide.ndim}-D input')
    if not np.all(np.isfinite(wide)):
        raise MalformedAudioError('Audio samples contain NaN or infinite values')
    if wide.size and float(np.max(np.abs(wide))) > _FLOAT32_MAX:
        raise MalformedAudioError('Audio samples exceed the float32 range')
    return wide.astype(np.float32)


def decode_pcm16(data: bytes) -> np.ndarray:
    """Decode signed 16-bit little-endian PCM (Path B); each sample maps to ``s / 32768``."""
    if len(data) % PCM_SAMPLE_WIDTH != 0:
        raise MalformedAudioError(f'PCM byte length must be a multiple of {PCM_SAMPLE_WIDTH}, got {len(data)}')
    return np.frombuffer(data, dtype='<i2').astype(np.float32) / np.float32(PCM_SCALE)


def decode_base64_pcm(encoded: str | bytes) -> np.ndarray:
    """Decode base64 text carrying 16-bit PCM, then decode the PCM."""
    try:
        raw = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise MalformedAudioError(f'Invalid base64 audio payload: {exc}') from exc
    return decode_pcm16(raw)


def peak_normalize(buffer: np.ndarray, target: float = PEAK_TARGET) -> np.ndarray:
    """Scale *buffer* so its peak absolute amplitude equals *target*.

    Silent (all-zero) and empty buffers are returned unscaled. Re-normalizing
    an already normalized buffer rescales it again; it is only a fixed point
    when the peak already equals *target*.
    """
    if buffer.size == 0:
        return buffer.copy()
    max_amplitude = float(np.max(np.abs(buffer)))
    if max_amplitude == 0.0:
        return buffer.copy()
    # Scale in float64: target / max overflows float32 for subnormal peaks.
    return (buffer.astype(np.float64) * (target / max_amplitude)).astype(np.float32)


def rms(buffer: np.ndarray) -> float:
    """Root-mean-square energy; 0.0 for an empty buffer."""
    if buffer.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(buffer, dtype=np.float64))))


def split_into_chunks(buffer: np.ndarray | bytes, chunk_size: int) -> list:
    """Cut *buffer* (samples or PCM bytes) into consecutive *chunk_size* slices; the shorter tail is kept."""
    if chunk_size <= 0:
        raise ValueError(f'chunk_size must be positive, got {chunk_size}')
    return [buffer[i : i + chunk_size] for i in range(0, len(buffer), chunk_size)]
