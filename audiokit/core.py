import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

import numpy as np

from application.dto.sample_buffer import SampleBuffer
from application.dto.selection_dto import SelectionDTO
from application.ports.audio_decoder_port import IAudioDecoder
from application.ports.audio_loader_port import IAudioLoader
from application.ports.audio_writer_port import IAudioWriter
from application.ports.buffer_concat_port import IBufferConcatenator
from application.ports.channel_remixer_port import IChannelRemixer
from audiokit.cache import LoadCache
from audiokit.compose import buffer_from, compose
from audiokit.errors import InvalidArgument, Unimplemented
from audiokit.interval import parse_call, resolve_interval, to_frames
from audiokit.utils import (
    DEFAULT_DECODE_OPTIONS,
    parse_format,
    resolve_path,
    validate_output_path,
)
from infrastructure.audio import (
    FileAudioLoader,
    NumpyBufferConcatenator,
    NumpyChannelRemixer,
    SoundfileDecoder,
    SoundfileWriter,
)

logger = logging.getLogger(__name__)

# callback(error, result); error is None on success
Callback = Callable[[Optional[BaseException], Any], None]

_decoder: IAudioDecoder = SoundfileDecoder()
_remixer: IChannelRemixer = NumpyChannelRemixer()


class Audio:
    """
    In-memory audio: one exclusively owned SampleBuffer plus derived properties.

    Construction:
        Audio(source, options)              one source, synchronously
        Audio.from_(*sources, options)      compose many sources (aliases:
                                            create, join, concat)
        await Audio.load(path_or_url)       cached fetch + decode
        await Audio.decode(encoded_bytes)   decode without caching

    ``load`` and ``decode`` return asyncio futures and must be called while
    an event loop is running.

    Collaborators are class attributes and may be swapped (tests replace
    ``cache`` with a fresh LoadCache per case).
    """

    decoder: IAudioDecoder = _decoder
    loader: IAudioLoader = FileAudioLoader(_decoder)
    remixer: IChannelRemixer = _remixer
    concatenator: IBufferConcatenator = NumpyBufferConcatenator(_remixer)
    writer: IAudioWriter = SoundfileWriter()
    cache: LoadCache = LoadCache()

    def __init__(self, source: Any = None, options: Any = None) -> None:
        if isinstance(options, str):
            options = parse_format(options)
        if isinstance(source, Audio):
            self.buffer: SampleBuffer = source.buffer.clone()
        else:
            self.buffer = buffer_from(source, options)

    def __repr__(self) -> str:
        return (
            f"Audio(channels={self.channels}, sample_rate={self.sample_rate}, "
            f"length={self.length}, duration={self.duration:.3f})"
        )

    # ── Properties ───────────────────────────────────────────────

    @property
    def channels(self) -> int:
        return self.buffer.channels

    @channels.setter
    def channels(self, channels: int) -> None:
        if channels == self.buffer.channels:
            return
        self.buffer = self.remixer.remix(self.buffer, channels)

    @property
    def sample_rate(self) -> int:
        return self.buffer.sample_rate

    @sample_rate.setter
    def sample_rate(self, sample_rate: int) -> None:
        raise Unimplemented(
            "Changing the sample rate of existing audio is not supported.\n"
            "    → Decode or build the audio at the rate you need."
        )

    @property
    def duration(self) -> float:
        return self.buffer.duration

    @duration.setter
    def duration(self, duration: float) -> None:
        if duration < 0:
            raise InvalidArgument(f"Duration cannot be negative. Got: {duration}.")
        length: int = to_frames(duration * self.sample_rate)
        if length < self.length:
            self.buffer = self.buffer.slice(0, length)
        elif length > self.length:
            padding = np.zeros((length - self.length, self.channels), dtype=self.buffer.data.dtype)
            self.buffer = SampleBuffer(np.concatenate([self.buffer.data, padding]), self.sample_rate)

    @property
    def length(self) -> int:
        return self.buffer.length

    @length.setter
    def length(self, length: int) -> None:
        if length < 0:
            raise InvalidArgument(f"Length cannot be negative. Got: {length}.")
        if length > self.length:
            raise Unimplemented(
                f"Growing audio from {self.length} to {length} frames is not supported.\n"
                f"    → Set 'duration' instead to pad with silence."
            )
        if length < self.length:
            self.buffer = self.buffer.slice(0, length)

    # ── Selection ────────────────────────────────────────────────

    def _args(self, time: Any = None, duration: Any = None, options: Any = None) -> SelectionDTO:
        """Resolve a selection call against the current buffer."""
        return resolve_interval(
            parse_call(time, duration, options),
            buffer_length=self.length,
            sample_rate=self.sample_rate,
            channels=self.channels,
        )

    def _select(self, selection: SelectionDTO) -> np.ndarray:
        # fancy indexing on channels copies
        return self.buffer.data[selection.start:selection.end, list(selection.channels)]

    def read(self, time: Any = None, duration: Any = None, options: Any = None) -> np.ndarray:
        """Selected samples as a (num_frames, channels) array, cast to the selection format if given."""
        selection: SelectionDTO = self._args(time, duration, options)
        samples: np.ndarray = self._select(selection)
        if selection.format:
            samples = samples.astype(selection.format)
        return samples

    def slice(self, time: Any = None, duration: Any = None, options: Any = None) -> "Audio":
        """New audio holding a copy of the selected frames and channels."""
        selection: SelectionDTO = self._args(time, duration, options)
        return type(self)(SampleBuffer(self._select(selection), self.sample_rate))

    def get_channel_data(self, channel: int) -> np.ndarray:
        return self.buffer.get_channel_data(channel)

    # ── Copy / compare / persist ─────────────────────────────────

    def clone(self, deep: bool = True) -> "Audio":
        if deep:
            return type(self)(self.buffer.clone())
        return type(self)(self.buffer)

    def equal(self, *others: "Audio") -> bool:
        """
        True if every audio in *others* matches this one sample for sample.

        Works bound (``a.equal(b)``) or unbound (``Audio.equal(a, b, c)``).
        """
        for other in others:
            if other is self:
                continue
            if (
                self.length != other.length
                or self.channels != other.channels
                or self.sample_rate != other.sample_rate
            ):
                return False
            for c in range(self.channels):
                if not np.array_equal(self.get_channel_data(c), other.get_channel_data(c)):
                    return False
        return True

    is_equal = equal

    def save(self, file_name: str, callback: Optional[Callback] = None) -> "Audio":
        """
        Encode and write this audio to *file_name*.

        Relative names resolve against the caller's file. Write errors are
        raised, or handed to ``callback(error, self)`` when a callback is given.
        """
        if not file_name:
            raise InvalidArgument(
                "File name is not provided.\n"
                "    → Example: audio.save('take_01.wav')"
            )

        path: str = resolve_path(file_name, depth=2)
        validate_output_path(path)

        try:
            self.writer.write(self.writer.encode(self.buffer), path)
        except Exception as exc:
            if callback is None:
                raise
            logger.error("save failed path=%s: %s", path, exc)
            callback(exc, self)
            return self

        logger.info("saved %s", path)
        if callback is not None:
            callback(None, self)
        return self

    # ── Factories ────────────────────────────────────────────────

    @classmethod
    def from_(cls, *sources: Any) -> "Audio":
        """
        Compose one audio from many sources, end to end.

        A trailing mapping (without both ``duration`` and ``length``) or a
        format string is taken as options shared by every source.
        """
        return cls(compose(sources, to_buffer=cls._leaf_buffer, concatenator=cls.concatenator))

    create = from_
    join = from_
    concat = from_

    @classmethod
    def _leaf_buffer(cls, value: Any, options: Optional[dict]) -> SampleBuffer:
        if isinstance(value, Audio):
            return value.buffer
        return cls(value, options).buffer

    @classmethod
    def load(cls, source: Any, callback: Optional[Callback] = None) -> asyncio.Future:
        """
        Load audio from a path or URL (or a list of sources) through the cache.

        Strings resolve against the caller's file and are fetched at most once
        per process; every caller gets its own clone. Lists resolve all items
        and fail on the first error. Other sources are decoded.
        """
        if isinstance(source, str):
            key: str = resolve_path(source, depth=2)
            future: asyncio.Future = cls.cache.fetch(key, lambda: cls._fetch(key))
        elif isinstance(source, (list, tuple)):
            items: list = []
            for item in source:
                if isinstance(item, str):
                    items.append(cls.load(resolve_path(item, depth=2)))
                elif inspect.isawaitable(item):
                    items.append(item)
                else:
                    items.append(cls._settled(lambda item=item: cls(item)))
            future = asyncio.gather(*items)
        else:
            return cls.decode(source, callback=callback)

        return _notify(future, callback)

    @classmethod
    def decode(
        cls,
        source: Any,
        options: Any = None,
        callback: Optional[Callback] = None,
    ) -> asyncio.Future:
        """Decode encoded audio (or a list of sources) into Audio, bypassing the cache."""
        if callable(options) and callback is None:
            callback, options = options, None

        if source is None:
            raise InvalidArgument(
                "No source to decode.\n"
                "    → Pass encoded bytes, a file path, or a list of those."
            )

        if isinstance(source, (list, tuple)):
            items: list = [item if inspect.isawaitable(item) else cls.decode(item) for item in source]
            return _notify(asyncio.gather(*items), callback)

        decode_options: dict = dict(DEFAULT_DECODE_OPTIONS if options is None else options)
        future: asyncio.Future = asyncio.get_running_loop().create_task(
            cls._decode_one(source, decode_options)
        )
        return _notify(future, callback)

    @classmethod
    async def _fetch(cls, key: str) -> "Audio":
        return cls(await cls.loader.load(key))

    @classmethod
    async def _decode_one(cls, source: Any, options: dict) -> "Audio":
        if isinstance(source, (Audio, SampleBuffer)):
            return cls(source)
        return cls(await cls.decoder.decode(source, options))

    @staticmethod
    def _settled(build: Callable[[], Any]) -> asyncio.Future:
        """Already-completed future holding build()'s result or the error it raised."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        try:
            future.set_result(build())
        except Exception as exc:
            future.set_exception(exc)
        return future


def _notify(future: asyncio.Future, callback: Optional[Callback]) -> asyncio.Future:
    """Mirror the outcome of *future* into an error-first *callback*."""
    if callback is not None:
        def _done(done: asyncio.Future) -> None:
            if done.cancelled():
                return
            error: Optional[BaseException] = done.exception()
            callback(error, None if error is not None else done.result())

        future.add_done_callback(_done)
    return future
