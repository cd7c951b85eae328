"""Gateway: whisper.cpp acoustic model. Implements AcousticModel port."""

from __future__ import annotations

import contextlib
import logging
import os
import threading

import numpy as np
from pywhispercpp.model import Model

log = logging.getLogger('pw.model')

# fds 1 and 2 are process-wide; swaps must not interleave across threads.
_fd_lock = threading.RLock()


@contextlib.contextmanager
def _suppress_c_stdout():
    """Redirect C-level stdout and stderr to /dev/null.

    whisper.cpp prints init/progress messages directly via C fprintf,
    bypassing Python's sys.stdout and corrupting CLI output.
    """
    with _fd_lock:
        devnull = os.open(os.devnull, os.O_WRONLY)
        old_stdout = os.dup(1)
        old_stderr = os.dup(2)
        try:
            os.dup2(devnull, 1)
            os.dup2(devnull, 2)
            yield
        finally:
            os.dup2(old_stdout, 1)
            os.dup2(old_stderr, 2)
            os.close(devnull)
            os.close(old_stdout)
            os.close(old_stderr)


class WhisperCppAcousticModel:
    """pywhispercpp adapter. Handles model loading, C stdout suppression,
    and joining segment texts into one transcript.

    One whisper.cpp context serves one call at a time: load, infer and
    release all run under ``_lock``.
    """

    def __init__(self, language: str = 'auto', n_threads: int = 4) -> None:
        self._language = language
        self._n_threads = n_threads
        self._model: Model | None = None
        self._lock = threading.Lock()

    def load(self, model_path: str) -> bool:
        if not os.path.isfile(model_path):
            log.error('Model file not readable: %s', model_path)
            return False
        log.info('Model file size: %d bytes', os.path.getsize(model_path))
        with self._lock, _suppress_c_stdout():
            self._model = Model(
                model_path,
                n_threads=self._n_threads,
                print_progress=False,
                print_realtime=False,
            )
        return True

    def infer(self, samples: np.ndarray) -> str:
        kwargs: dict = {}
        if self._language and self._language != 'auto':
            kwargs['language'] = self._language

        with self._lock:
            if self._model is None:
                raise RuntimeError('Model not loaded. Call load() first.')
            with _suppress_c_stdout():
                raw_segments = self._model.transcribe(samples.astype(np.float32, copy=False), **kwargs)

        return ''.join(seg.text for seg in raw_segments).strip()

    def release(self) -> None:
        """Explicitly release the model, suppressing C-level teardown noise."""
        with self._lock:
            if self._model is not None:
                with _suppress_c_stdout():
                    del self._model
                    self._model = None
