"""Configuration Pydantic models: pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ModelConfig(BaseModel):
    filename: str
    directory: str | None = None  # None = platform user data dir
    search_paths: list[str] = Field(default_factory=list)
    load_timeout: float = Field(gt=0)


class TranscriptionConfig(BaseModel):
    language: str
    n_threads: int = Field(ge=1)
    confidence: float = Field(ge=0.0, le=1.0)
    chunk_duration: float = Field(gt=0)
    silence_threshold: float = Field(ge=0.0)


class AppConfig(BaseModel):
    model: ModelConfig
    transcription: TranscriptionConfig
