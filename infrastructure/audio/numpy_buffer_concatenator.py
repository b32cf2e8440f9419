# infrastructure/audio/numpy_buffer_concatenator.py
# Implementation of IBufferConcatenator using NumPy.

from typing import Optional, Sequence

import numpy as np

from application.dto.sample_buffer import SampleBuffer
from application.ports.buffer_concat_port import IBufferConcatenator
from application.ports.channel_remixer_port import IChannelRemixer
from audiokit.utils import DEFAULT_DTYPE
from infrastructure.audio.numpy_channel_remixer import NumpyChannelRemixer


class NumpyBufferConcatenator(IBufferConcatenator):
    """Join buffers frame-wise, remixing each one to the target channel count first."""

    def __init__(self, remixer: Optional[IChannelRemixer] = None) -> None:
        self._remixer: IChannelRemixer = remixer or NumpyChannelRemixer()

    def concat(
        self,
        buffers: Sequence[SampleBuffer],
        channels: int,
        sample_rate: int,
    ) -> SampleBuffer:
        parts: list[np.ndarray] = []
        for buffer in buffers:
            if buffer.channels != channels:
                buffer = self._remixer.remix(buffer, channels)
            parts.append(buffer.data)

        if not parts:
            return SampleBuffer(np.zeros((0, channels), dtype=DEFAULT_DTYPE), sample_rate)
        return SampleBuffer(np.concatenate(parts, axis=0), sample_rate)
