# application/ports/audio_decoder_port.py
# Port interface for turning encoded audio into samples.
# Domain layer: must not import infrastructure or adapter code.

from abc import ABC, abstractmethod
from typing import Any, Mapping

from application.dto.sample_buffer import SampleBuffer


class IAudioDecoder(ABC):
    """Abstract base class for audio decoders."""

    @abstractmethod
    async def decode(self, source: Any, options: Mapping[str, Any]) -> SampleBuffer:
        """
        Decode *source* into a sample buffer.

        Args:
            source:  Encoded bytes, a file path, or a binary file object.
            options: Decoder options (e.g. ``dtype``).

        Returns:
            Decoded samples.

        Raises:
            DecodeFailure: The source is not decodable audio.
        """
        ...
