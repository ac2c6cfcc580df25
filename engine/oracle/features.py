# engine/oracle/features.py

"""
Synthetic signal generator feeding the anomaly oracle.

The signal is a stand-in, not sensor data: three fixed-frequency
sinusoids (1 Hz, 5 Hz, 15 Hz) sampled every 10 ms plus bounded
uniform noise. Shapes are deterministic, values are not unless a
deterministic noise source is injected.
"""

from typing import Protocol

import numpy as np

SAMPLE_STEP = 0.01
NOISE_AMPLITUDE = 0.1

PLANE_HEIGHT = 64
MIN_PLANE_WIDTH = 32
MIN_SEQUENCE_LENGTH = 100
BYTES_PER_SAMPLE = 4
CNN_INPUT_LENGTH = 250

# (amplitude, frequency in Hz)
HARMONICS = ((1.0, 1.0), (0.3, 5.0), (0.1, 15.0))


class NoiseSource(Protocol):
    """Anything with numpy Generator-style uniform sampling."""

    def uniform(self, low: float, high: float, size=None): ...


class ZeroNoise:
    """Noise source that always yields zeros."""

    def uniform(self, low: float, high: float, size=None):
        if size is None:
            return 0.0
        return np.zeros(size, dtype=np.float64)


def default_noise() -> NoiseSource:
    return np.random.default_rng()


def sequence_length(data_size_bytes: int) -> int:
    """Number of samples synthesized for a payload of the given size."""
    return max(MIN_SEQUENCE_LENGTH, int(data_size_bytes) // BYTES_PER_SAMPLE)


def _waveform(n: int, noise: NoiseSource) -> np.ndarray:
    t = np.arange(n, dtype=np.float64) * SAMPLE_STEP
    signal = np.zeros(n, dtype=np.float64)
    for amplitude, freq in HARMONICS:
        signal += amplitude * np.sin(2 * np.pi * freq * t)
    signal += np.asarray(noise.uniform(-NOISE_AMPLITUDE, NOISE_AMPLITUDE, n), dtype=np.float64)
    return signal


def generate_signal_1d(length: int, noise: NoiseSource | None = None) -> np.ndarray:
    """1-D float32 signal of the requested length."""
    if length <= 0:
        return np.zeros(0, dtype=np.float32)
    return _waveform(length, noise or default_noise()).astype(np.float32)


def generate_signal_4d(length: int, noise: NoiseSource | None = None) -> np.ndarray:
    """
    Spectrogram-like plane shaped [1, 1, 64, width].

    width = max(32, length // 4); samples run in row-major time order.
    """
    width = max(MIN_PLANE_WIDTH, length // 4)
    flat = _waveform(PLANE_HEIGHT * width, noise or default_noise())
    return flat.reshape(1, 1, PLANE_HEIGHT, width).astype(np.float32)


def fit_to_length(data: np.ndarray, length: int = CNN_INPUT_LENGTH) -> np.ndarray:
    """Zero-pad or truncate a 1-D signal to exactly length samples."""
    flat = np.asarray(data, dtype=np.float32).ravel()
    out = np.zeros(length, dtype=np.float32)
    n = min(flat.size, length)
    out[:n] = flat[:n]
    return out
