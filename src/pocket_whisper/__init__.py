"""pocket-whisper -- offline speech-to-text on a bundled whisper.cpp model."""

__version__ = '0.1.0'
