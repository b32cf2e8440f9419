# application/ports/audio_loader_port.py
# Port interface for fetching audio by resource key.

from abc import ABC, abstractmethod

from application.dto.sample_buffer import SampleBuffer


class IAudioLoader(ABC):
    """Abstract base class for path/URL audio loaders."""

    @abstractmethod
    async def load(self, key: str) -> SampleBuffer:
        """
        Fetch and decode the resource named by *key*.

        Args:
            key: Absolute file path or URL.

        Raises:
            FetchFailure:  The resource could not be read.
            DecodeFailure: The resource is not decodable audio.
        """
        ...
