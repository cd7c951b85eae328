"""Use case: model readiness state machine (unloaded, loading, ready or failed; release returns to unloaded)."""

from __future__ import annotations

import logging
import threading

from pocket_whisper.l1_entities.errors import ModelLoadError, ModelNotLoadedError
from pocket_whisper.l1_entities.model_state import ModelHandle, ModelState, ModelStatus
from pocket_whisper.l2_use_cases.ports.acoustic_model import AcousticModel

log = logging.getLogger('pw.lifecycle')

_ALLOWED: dict[ModelState, frozenset[ModelState]] = {
    ModelState.UNLOADED: frozenset({ModelState.LOADING}),
    ModelState.LOADING: frozenset({ModelState.READY, ModelState.FAILED, ModelState.UNLOADED}),
    ModelState.READY: frozenset({ModelState.UNLOADED}),
    ModelState.FAILED: frozenset(),
}


class ModelLifecycle:
    """Owns the ModelHandle and the acoustic model it guards.

    All state changes go through ``_transition()`` under one lock, including
    the completion report of the background load. Readers only ever observe
    the state; the acoustic model is lent out through ``model`` while READY.
    """

    def __init__(self, acoustic_model: AcousticModel, model_path: str) -> None:
        self._model = acoustic_model
        self._handle = ModelHandle(path=model_path)
        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._settled.set()  # nothing in flight yet

    @property
    def state(self) -> ModelState:
        return self._handle.state

    @property
    def model_path(self) -> str:
        return self._handle.path

    @property
    def last_error(self) -> str:
        return self._handle.error

    @property
    def model(self) -> AcousticModel:
        """Borrow the acoustic model. Only valid while READY."""
        if self._handle.state is not ModelState.READY:
            raise ModelNotLoadedError()
        return self._model

    def is_ready(self) -> bool:
        return self._handle.state is ModelState.READY

    def status(self) -> ModelStatus:
        state = self._handle.state
        return ModelStatus(is_loaded=state is ModelState.READY, model_path=self._handle.path, state=state)

    def begin_load(self) -> threading.Thread | None:
        """Start loading off the caller's thread. Returns the loader thread, or None if ignored.

        Only valid from UNLOADED on a handle that was never released; any
        other call is a no-op so at most one load is ever in flight.
        """
        with self._lock:
            if self._handle.released or self._handle.state is not ModelState.UNLOADED:
                log.debug('begin_load ignored in state %s (released=%s)', self._handle.state.value, self._handle.released)
                return None
            self._transition(ModelState.LOADING)
            self._settled.clear()

        thread = threading.Thread(target=self._run_load, name='pw-model-load', daemon=True)
        thread.start()
        return thread

    def wait_until_settled(self, timeout: float | None = None) -> bool:
        """Block until no load is in flight. Returns False on timeout."""
        return self._settled.wait(timeout)

    def release(self) -> None:
        """Spend the handle. Frees the model now when READY, or once an in-flight load lands.

        After the first call the handle never loads again; later calls do nothing.
        """
        with self._lock:
            if self._handle.released:
                log.debug('release ignored: handle already released')
                return
            self._handle.released = True
            if self._handle.state is ModelState.LOADING:
                log.info('Release requested while loading; model is freed when the load finishes')
                return
            if self._handle.state is not ModelState.READY:
                log.debug('release in state %s: nothing to free', self._handle.state.value)
                return
            self._free_model()

    def _run_load(self) -> None:
        path = self._handle.path
        log.info('Loading model from %s', path)
        try:
            if not self._model.load(path):
                raise ModelLoadError(f'Acoustic model rejected file: {path}')
        except Exception as exc:
            err = exc if isinstance(exc, ModelLoadError) else ModelLoadError(f'{type(exc).__name__}: {exc}')
            log.error('Model load failed: %s', err, exc_info=True)
            with self._lock:
                self._handle.error = str(err)
                self._transition(ModelState.FAILED)
        else:
            with self._lock:
                if self._handle.released:
                    log.info('Model loaded after release; freeing it')
                    self._free_model()
                else:
                    self._transition(ModelState.READY)
        finally:
            self._settled.set()

    def _free_model(self) -> None:
        """Release the acoustic model and settle to UNLOADED. Caller must hold ``_lock``."""
        try:
            self._model.release()
        except Exception:
            log.error('Error while releasing model %s', self._handle.path, exc_info=True)
        finally:
            self._transition(ModelState.UNLOADED)

    def _transition(self, new_state: ModelState) -> None:
        """Move to *new_state*. Caller must hold ``_lock``."""
        old_state = self._handle.state
        if new_state not in _ALLOWED[old_state]:
            raise RuntimeError(f'Illegal model state transition {old_state.value} -> {new_state.value}')
        self._handle.state = new_state
        log.info('Model state %s -> %s', old_state.value, new_state.value)
