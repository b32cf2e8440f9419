# infrastructure/audio/soundfile_decoder.py
# Implementation of IAudioDecoder using soundfile, with pydub (ffmpeg) as the
# fallback for containers libsndfile cannot read.

import asyncio
import io
import logging
import os
from typing import Any, Mapping

import numpy as np
import soundfile as sf
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from application.dto.sample_buffer import SampleBuffer
from application.ports.audio_decoder_port import IAudioDecoder
from audiokit.errors import DecodeFailure
from audiokit.utils import DEFAULT_DTYPE

logger = logging.getLogger(__name__)


class SoundfileDecoder(IAudioDecoder):
    """Decode bytes, paths and binary file objects into float PCM."""

    async def decode(self, source: Any, options: Mapping[str, Any]) -> SampleBuffer:
        # libsndfile and ffmpeg block; keep them off the event loop
        return await asyncio.to_thread(self._read, source, options)

    def _read(self, source: Any, options: Mapping[str, Any]) -> SampleBuffer:
        dtype: str = options.get("dtype", DEFAULT_DTYPE)

        if isinstance(source, (bytes, bytearray, memoryview)):
            stream: Any = io.BytesIO(bytes(source))
        elif isinstance(source, (str, os.PathLike)) or hasattr(source, "read"):
            stream = source
        else:
            raise DecodeFailure(
                f"Unsupported source type: '{type(source).__name__}'.\n"
                f"    → Pass encoded bytes, a file path, or a binary file object."
            )

        samples: np.ndarray
        sr: int
        try:
            samples, sr = sf.read(stream, dtype=dtype, always_2d=True)
        except RuntimeError as exc:
            logger.debug("soundfile could not read source (%s), trying pydub", exc)
            if hasattr(stream, "seek"):
                stream.seek(0)
            samples, sr = self._read_with_pydub(stream, dtype)

        return SampleBuffer(samples, sr)

    def _read_with_pydub(self, stream: Any, dtype: str) -> tuple:
        try:
            segment: AudioSegment = AudioSegment.from_file(stream)
            wav = io.BytesIO()
            segment.export(wav, format="wav")
            wav.seek(0)
            return sf.read(wav, dtype=dtype, always_2d=True)
        except (CouldntDecodeError, OSError, RuntimeError) as exc:
            raise DecodeFailure(
                f"Could not decode audio: {exc}\n"
                f"    → Check that the source is a supported audio file and ffmpeg is installed."
            ) from exc
