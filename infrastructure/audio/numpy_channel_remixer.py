# infrastructure/audio/numpy_channel_remixer.py
# Implementation of IChannelRemixer using NumPy.

import numpy as np

from application.dto.sample_buffer import SampleBuffer
from application.ports.channel_remixer_port import IChannelRemixer
from audiokit.errors import InvalidArgument


class NumpyChannelRemixer(IChannelRemixer):
    """
    Speaker-style remix.

    Down to mono averages all channels, up from mono copies the single
    channel everywhere, any other change keeps the shared channels and
    drops or zero-fills the rest.
    """

    def remix(self, buffer: SampleBuffer, channels: int) -> SampleBuffer:
        if channels < 1:
            raise InvalidArgument(
                f"Channel count must be at least 1. Got: {channels}.\n"
                f"    → Use 1 for mono, 2 for stereo."
            )

        samples: np.ndarray = buffer.data
        source_channels: int = buffer.channels

        if channels == source_channels:
            mixed: np.ndarray = samples.copy()
        elif channels == 1:
            mixed = samples.mean(axis=1, keepdims=True).astype(samples.dtype)
        elif source_channels == 1:
            mixed = np.repeat(samples, channels, axis=1)
        else:
            mixed = np.zeros((buffer.length, channels), dtype=samples.dtype)
            shared: int = min(source_channels, channels)
            mixed[:, :shared] = samples[:, :shared]

        return SampleBuffer(mixed, buffer.sample_rate)
