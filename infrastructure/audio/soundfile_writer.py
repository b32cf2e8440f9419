# infrastructure/audio/soundfile_writer.py
# Implementation of IAudioWriter: soundfile for WAV, pydub export for the rest.

import io
import logging

import soundfile as sf
from pydub import AudioSegment

from application.dto.sample_buffer import SampleBuffer
from application.ports.audio_writer_port import IAudioWriter
from audiokit.utils import get_export_format

logger = logging.getLogger(__name__)


class SoundfileWriter(IAudioWriter):
    def encode(self, buffer: SampleBuffer) -> bytes:
        stream = io.BytesIO()
        sf.write(stream, buffer.data, buffer.sample_rate, format="WAV", subtype="PCM_16")
        return stream.getvalue()

    def write(self, data: bytes, path: str) -> None:
        export_fmt: str = get_export_format(path)

        if export_fmt == "wav":
            with open(path, "wb") as f:
                f.write(data)
        else:
            audio_out: AudioSegment = AudioSegment.from_wav(io.BytesIO(data))
            audio_out.export(path, format=export_fmt)
        logger.debug("wrote %d bytes of wav as %s to %s", len(data), export_fmt, path)
