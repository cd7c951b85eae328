"""Gateway: audio file loader. Reads any audio format as 16 kHz mono s16le PCM bytes."""

from __future__ import annotations

import shutil
import subprocess  # noqa: S404 -- intentional: shells out to ffmpeg with a fixed arg list, not shell=True
from pathlib import Path

from pocket_whisper.l1_entities.audio_constants import CHANNELS, SAMPLE_RATE

_FFMPEG_TIMEOUT = 300  # seconds
RAW_PCM_SUFFIXES = frozenset({'.pcm', '.raw'})


def load_pcm_bytes(path: Path) -> bytes:
    """Load *path* as signed 16-bit little-endian PCM at 16 kHz mono.

    ``.pcm`` / ``.raw`` files are assumed to already be in that format and are
    read as-is. Anything else goes through ffmpeg (WAV, FLAC, MP3, M4A, OGG, ...).

    Raises:
        FileNotFoundError: audio file does not exist.
        RuntimeError: ffmpeg is missing, conversion failed, timed out, or
                      the file contains no decodable audio.
    """
    if not path.exists():
        raise FileNotFoundError(f'Audio file not found: {path}')

    if path.suffix.lower() in RAW_PCM_SUFFIXES:
        return path.read_bytes()

    if shutil.which('ffmpeg') is None:
        raise RuntimeError(
            'ffmpeg is required but not found on PATH.\n  macOS:  brew install ffmpeg\n  Debian: apt install ffmpeg'
        )

    cmd = [
        'ffmpeg',
        '-i',
        str(path),
        '-ar',
        str(SAMPLE_RATE),
        '-ac',
        str(CHANNELS),
        '-f',
        's16le',
        '-v',
        'quiet',
        'pipe:1',
    ]

    try:
        result = subprocess.run(cmd, capture_output=True, timeout=_FFMPEG_TIMEOUT)  # noqa: S603
    except subprocess.TimeoutExpired as exc:
        raise RuntimeError(f'ffmpeg timed out after {_FFMPEG_TIMEOUT}s processing: {path}') from exc
    except OSError as exc:
        raise RuntimeError(f'Failed to launch ffmpeg: {exc}') from exc

    if result.returncode != 0:
        stderr = result.stderr.decode('utf-8', errors='replace').strip()
        raise RuntimeError(f'ffmpeg exited with code {result.returncode} for: {path}\n{stderr}')

    if not result.stdout:
        raise RuntimeError(f'ffmpeg produced no audio output for: {path}')

    return result.stdout
