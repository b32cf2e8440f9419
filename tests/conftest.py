import io

import numpy as np
import pytest
import soundfile as sf

from audiokit.cache import LoadCache
from audiokit.core import Audio


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch: pytest.MonkeyPatch) -> LoadCache:
    """Every test starts with an empty load cache."""
    cache: LoadCache = LoadCache()
    monkeypatch.setattr(Audio, "cache", cache)
    return cache


def make_stereo_sine(freq: int = 440, duration: float = 0.5, sr: int = 8000) -> np.ndarray:
    """Create a stereo sine wave test signal, shape (frames, 2)."""
    num_frames: int = int(sr * duration)
    t: np.ndarray = np.linspace(0, duration, num_frames, dtype=np.float32)
    mono: np.ndarray = (0.5 * np.sin(2 * np.pi * freq * t)).astype(np.float32)
    return np.column_stack([mono, mono])


def make_test_wav(path: str, duration: float = 0.5, sr: int = 8000) -> None:
    """Write a short stereo WAV file."""
    sf.write(path, make_stereo_sine(duration=duration, sr=sr), sr, subtype="PCM_16")


def make_wav_bytes(duration: float = 0.5, sr: int = 8000) -> bytes:
    stream = io.BytesIO()
    sf.write(stream, make_stereo_sine(duration=duration, sr=sr), sr, format="WAV", subtype="PCM_16")
    return stream.getvalue()
