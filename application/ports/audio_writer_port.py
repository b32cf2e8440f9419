# application/ports/audio_writer_port.py
# Port interface for encoding and persisting audio.

from abc import ABC, abstractmethod

from application.dto.sample_buffer import SampleBuffer


class IAudioWriter(ABC):
    """Abstract base class for audio file writers."""

    @abstractmethod
    def encode(self, buffer: SampleBuffer) -> bytes:
        """Encode *buffer* as a 16-bit PCM WAV file image."""
        ...

    @abstractmethod
    def write(self, data: bytes, path: str) -> None:
        """
        Persist encoded WAV *data* at *path*.

        The extension of *path* selects the container; non-WAV targets are
        transcoded from the WAV image.
        """
        ...
