"""Domain error types."""


class TranscriptionError(Exception):
    """Base class for every failure a transcription request can resolve to."""

    code = 'TRANSCRIPTION_ERROR'
    retryable = False


class ModelNotLoadedError(TranscriptionError):
    """Raised when transcription is attempted while the model is not ready."""

    code = 'MODEL_NOT_LOADED'
    retryable = True

    def __init__(self, message: str = 'Whisper model is not loaded') -> None:
        super().__init__(message)


class MalformedAudioError(TranscriptionError):
    """Raised when input audio cannot be decoded into a mono float buffer."""

    code = 'MALFORMED_AUDIO'


class InferenceError(TranscriptionError):
    """Raised when decoding, normalizing or running inference fails unexpectedly."""

    code = 'TRANSCRIPTION_ERROR'


class ModelLoadError(TranscriptionError):
    """Raised when the background model load fails."""

    code = 'MODEL_LOAD_ERROR'


class ModelResolutionError(ModelLoadError):
    """Raised when the model file cannot be found in any search location."""
