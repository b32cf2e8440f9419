# infrastructure/audio/__init__.py
from .file_audio_loader import FileAudioLoader
from .numpy_buffer_concatenator import NumpyBufferConcatenator
from .numpy_channel_remixer import NumpyChannelRemixer
from .soundfile_decoder import SoundfileDecoder
from .soundfile_writer import SoundfileWriter

__all__ = [
    "FileAudioLoader",
    "NumpyBufferConcatenator",
    "NumpyChannelRemixer",
    "SoundfileDecoder",
    "SoundfileWriter",
]
