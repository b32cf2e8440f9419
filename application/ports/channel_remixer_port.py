# application/ports/channel_remixer_port.py
from abc import ABC, abstractmethod

from application.dto.sample_buffer import SampleBuffer


class IChannelRemixer(ABC):
    @abstractmethod
    def remix(self, buffer: SampleBuffer, channels: int) -> SampleBuffer:
        """Return a new buffer with *channels* channels mixed from *buffer*."""
        pass
