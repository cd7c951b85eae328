"""Transcription result entity and the success-or-failure outcome wrapper."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from pocket_whisper.l1_entities.errors import TranscriptionError

DEFAULT_CONFIDENCE = 0.8


class TranscriptionResult(BaseModel):
    """Transcribed text for one request.

    ``confidence`` is a fixed placeholder unless the inference capability
    reports a real score; it does not reflect model certainty.
    """

    text: str
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)


@dataclass(frozen=True)
class TranscriptionOutcome:
    """Resolution of one transcription request -- exactly one of result / error is set."""

    result: TranscriptionResult | None = None
    error: TranscriptionError | None = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError('TranscriptionOutcome needs exactly one of result or error')

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def code(self) -> str:
        return '' if self.error is None else self.error.code

    def unwrap(self) -> TranscriptionResult:
        """Return the result, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.result  # type: ignore[return-value]  # set whenever error is None
