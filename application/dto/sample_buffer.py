# application/dto/sample_buffer.py
# In-memory PCM buffer exchanged between the core and its collaborators.

from dataclasses import dataclass
from typing import Optional

import numpy as np

from audiokit.errors import InvalidArgument


@dataclass
class SampleBuffer:
    """
    Multi-channel PCM samples at a fixed sample rate.

    Args:
        data:        Samples as (num_frames, channels) array. A 1-D array is
                     promoted to a single channel.
        sample_rate: Sample rate in Hz.
    """
    data: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        data: np.ndarray = np.asarray(self.data)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        if data.ndim != 2:
            raise InvalidArgument(
                f"Sample data must be 1-D or 2-D. Got shape: {data.shape}.\n"
                f"    → Pass samples as (num_frames, channels)."
            )
        if self.sample_rate <= 0:
            raise InvalidArgument(
                f"Sample rate must be positive. Got: {self.sample_rate}."
            )
        self.data = data

    @property
    def channels(self) -> int:
        return self.data.shape[1]

    @property
    def length(self) -> int:
        return self.data.shape[0]

    @property
    def duration(self) -> float:
        return self.length / self.sample_rate

    def get_channel_data(self, channel: int) -> np.ndarray:
        return self.data[:, channel]

    def slice(self, start: int = 0, end: Optional[int] = None) -> "SampleBuffer":
        """Copy of frames [start, end), bounds clamped to the buffer."""
        if end is None:
            end = self.length
        start = min(max(0, start), self.length)
        end = min(max(start, end), self.length)
        return SampleBuffer(self.data[start:end].copy(), self.sample_rate)

    def clone(self) -> "SampleBuffer":
        return SampleBuffer(self.data.copy(), self.sample_rate)
