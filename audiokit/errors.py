# audiokit/errors.py
# Error kinds raised by the audio buffer layer.


class AudioError(Exception):
    """Base class for every error raised by audiokit."""


class InvalidArgument(AudioError, ValueError):
    """A required argument is missing or malformed."""


class Unimplemented(AudioError, NotImplementedError):
    """The operation is deliberately not supported."""


class DecodeFailure(AudioError):
    """The decoder could not turn the source into samples."""


class FetchFailure(AudioError):
    """The loader could not fetch the resource."""
