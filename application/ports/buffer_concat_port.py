# application/ports/buffer_concat_port.py
from abc import ABC, abstractmethod
from typing import Sequence

from application.dto.sample_buffer import SampleBuffer


class IBufferConcatenator(ABC):
    @abstractmethod
    def concat(
        self,
        buffers: Sequence[SampleBuffer],
        channels: int,
        sample_rate: int,
    ) -> SampleBuffer:
        """Join *buffers* end to end into one buffer of *channels* channels."""
        pass
