"""
Shared fixtures: synthetic signals written as PCM WAV files.
"""

import wave

import numpy as np
import pytest


def sine(frequency: float, seconds: float, sample_rate: int, amplitude: float = 1.0) -> np.ndarray:
    frames = int(round(seconds * sample_rate))
    t = np.arange(frames) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def silence(seconds: float, sample_rate: int) -> np.ndarray:
    return np.zeros(int(round(seconds * sample_rate)))


def write_wav(path, samples: np.ndarray, sample_rate: int, channels: int = 1) -> str:
    """
    Write float samples in [-1, 1] as 16-bit PCM.

    Mono input is duplicated onto every channel; 2-D input is (frames, channels).
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim == 1:
        samples = np.tile(samples[:, None], (1, channels))
    pcm = np.clip(np.round(samples * 32767.0), -32768, 32767).astype("<i2")

    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(samples.shape[1])
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return str(path)


@pytest.fixture
def make_wav(tmp_path):
    counter = {"n": 0}

    def _make(samples, sample_rate=44100, channels=1, name=None):
        counter["n"] += 1
        path = tmp_path / (name or f"track_{counter['n']}.wav")
        return write_wav(path, samples, sample_rate, channels)

    return _make


@pytest.fixture
def signals():
    """Signal generators, so test modules need not import conftest."""
    class _Signals:
        pass

    _Signals.sine = staticmethod(sine)
    _Signals.silence = staticmethod(silence)
    return _Signals
