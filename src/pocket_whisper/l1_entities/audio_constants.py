"""Audio format contract shared by every layer: 16 kHz, mono, 16-bit PCM range."""

SAMPLE_RATE = 16000
CHANNELS = 1
PCM_SAMPLE_WIDTH = 2  # bytes per int16 sample
PCM_SCALE = 32768.0
PEAK_TARGET = 0.8
