"""
Source classification and composition.

A composition call takes any mix of sources: raw sample lists, per-channel
groups, numpy arrays, PCM bytes, Audio objects, and lists nesting all of
those. ``classify`` builds an explicit tree (``Leaf`` / ``Node``), ``flatten``
walks it left to right, and ``compose`` turns the leaves into one buffer.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence, Union

import numpy as np

from application.dto.sample_buffer import SampleBuffer
from application.ports.buffer_concat_port import IBufferConcatenator
from audiokit.errors import InvalidArgument
from audiokit.utils import (
    DEFAULT_DTYPE,
    DEFAULT_SAMPLE_RATE,
    RAW_GROUP_LIMIT,
    is_numeric,
    parse_format,
)

logger = logging.getLogger(__name__)

CHANNEL_TYPES: tuple = (list, tuple, np.ndarray, memoryview)


@dataclass(frozen=True)
class Leaf:
    value: Any


@dataclass(frozen=True)
class Node:
    sources: tuple
    options: Optional[dict] = None


Tree = Union[Leaf, Node]


def split_options(sources: Sequence[Any]) -> tuple[list, Optional[dict]]:
    """Pop a trailing options value (a mapping or a format string) off *sources*."""
    items: list = list(sources)
    if not items:
        return items, None

    last: Any = items[-1]
    if isinstance(last, Mapping) and (not last.get("duration") or not last.get("length")):
        items.pop()
        return items, dict(last)
    if isinstance(last, str):
        items.pop()
        return items, parse_format(last)
    return items, None


def looks_like_samples(source: Sequence[Any]) -> bool:
    """
    True when a list is sample data rather than a list of sources.

    That is a numeric frame (``[0.5]``, ``[0.1, 0.2, ...]``) or a short group
    of per-channel arrays (``[[...], [...]]``).
    """
    if len(source) and is_numeric(source[0]) and (len(source) == 1 or is_numeric(source[1])):
        return True
    return len(source) < RAW_GROUP_LIMIT and all(isinstance(ch, CHANNEL_TYPES) for ch in source)


def classify(source: Any, options: Optional[dict] = None) -> Tree:
    if isinstance(source, (list, tuple)) and not looks_like_samples(source):
        return Node(tuple(classify(item, options) for item in source), options)
    return Leaf(source)


def flatten(tree: Tree) -> Iterator[Leaf]:
    if isinstance(tree, Leaf):
        yield tree
        return
    for child in tree.sources:
        yield from flatten(child)


def compose(
    sources: Sequence[Any],
    to_buffer: Callable[[Any, Optional[dict]], SampleBuffer],
    concatenator: IBufferConcatenator,
) -> SampleBuffer:
    """
    Resolve *sources* (with an optional trailing options value) into one buffer.

    Args:
        sources:      Positional sources as passed to ``Audio.from_``.
        to_buffer:    Turns one leaf value into a buffer, given the shared options.
        concatenator: Joins the leaf buffers.

    Returns:
        The concatenation, at the first leaf's sample rate, with as many
        channels as the widest leaf.
    """
    items, options = split_options(sources)
    if not items:
        raise InvalidArgument(
            "No sources to compose.\n"
            "    → Example: Audio.from_([0.1, 0.2, 0.3], other_audio)"
        )

    root: Node = Node(tuple(classify(item, options) for item in items), options)
    buffers: list[SampleBuffer] = [to_buffer(leaf.value, options) for leaf in flatten(root)]

    sample_rate: int = buffers[0].sample_rate
    channels: int = max(buffer.channels for buffer in buffers)
    if any(buffer.sample_rate != sample_rate for buffer in buffers):
        logger.warning(
            "composing buffers with mixed sample rates %s, declaring %d Hz without resampling",
            sorted({buffer.sample_rate for buffer in buffers}),
            sample_rate,
        )

    return concatenator.concat(buffers, channels=channels, sample_rate=sample_rate)


def buffer_from(source: Any, options: Optional[dict] = None) -> SampleBuffer:
    """
    Build a buffer from one raw source.

    Options: ``sample_rate`` (Hz), ``channels`` (interleave width / silence
    width), ``dtype`` or ``format`` (sample type), ``duration`` (seconds) or
    ``length`` (frames) for silence.
    """
    options = dict(options or {})
    if isinstance(source, Mapping):
        options = {**source, **options}
        source = None

    sample_rate: int = options.get("sample_rate") or options.get("rate") or DEFAULT_SAMPLE_RATE
    channels: Optional[int] = options.get("channels")
    if channels is not None and not (is_numeric(channels) and channels >= 1):
        raise InvalidArgument(
            f"Option 'channels' must be a positive channel count. Got: {channels!r}."
        )
    dtype: Optional[str] = options.get("dtype") or options.get("format")

    if isinstance(source, SampleBuffer):
        return source

    if source is None or is_numeric(source):
        if source is not None:
            options["duration"] = source
        if options.get("length") is not None:
            length: int = int(options["length"])
        else:
            length = int(float(options.get("duration") or 0) * sample_rate)
        if length < 0:
            raise InvalidArgument(f"Audio length cannot be negative. Got: {length} frames.")
        return SampleBuffer(np.zeros((length, int(channels or 1)), dtype=dtype or DEFAULT_DTYPE), sample_rate)

    if isinstance(source, np.ndarray):
        samples: np.ndarray = source.astype(dtype) if dtype else source.copy()
        if samples.ndim == 1 and channels and channels > 1:
            samples = _deinterleave(samples, int(channels))
        return SampleBuffer(samples, sample_rate)

    if isinstance(source, (bytes, bytearray, memoryview)) and not _is_typed_view(source):
        raw: np.ndarray = np.frombuffer(bytes(source), dtype=dtype or DEFAULT_DTYPE).copy()
        return SampleBuffer(_deinterleave(raw, int(channels or 1)), sample_rate)

    if isinstance(source, memoryview):
        samples = np.array(source, dtype=dtype) if dtype else np.array(source)
        return SampleBuffer(_deinterleave(samples, int(channels or 1)), sample_rate)

    if isinstance(source, (list, tuple)):
        if not source:
            return SampleBuffer(np.zeros((0, int(channels or 1)), dtype=dtype or DEFAULT_DTYPE), sample_rate)
        if is_numeric(source[0]):
            flat: np.ndarray = np.asarray(source, dtype=dtype or DEFAULT_DTYPE)
            return SampleBuffer(_deinterleave(flat, int(channels or 1)), sample_rate)
        per_channel: list[np.ndarray] = [np.asarray(ch, dtype=dtype or DEFAULT_DTYPE) for ch in source]
        if len({len(ch) for ch in per_channel}) > 1:
            raise InvalidArgument(
                f"Channel arrays differ in length: {[len(ch) for ch in per_channel]}.\n"
                f"    → Give every channel the same number of samples."
            )
        return SampleBuffer(np.stack(per_channel, axis=1), sample_rate)

    if isinstance(source, str):
        raise InvalidArgument(
            f"Cannot build audio from the string '{source}' synchronously.\n"
            f"    → Use: audio = await Audio.load('{source}')"
        )

    raise InvalidArgument(
        f"Unsupported audio source: '{type(source).__name__}'.\n"
        f"    → Pass samples (list or numpy array), PCM bytes, or an Audio object."
    )


# ── Internal ─────────────────────────────────────────────────────

def _is_typed_view(source: Any) -> bool:
    """A memoryview over typed samples (float32, int16, ...) rather than bytes."""
    return isinstance(source, memoryview) and source.format not in ("B", "b", "c")


def _deinterleave(samples: np.ndarray, channels: int) -> np.ndarray:
    if channels == 1:
        return samples
    if samples.size % channels:
        raise InvalidArgument(
            f"{samples.size} samples do not split into {channels} channels.\n"
            f"    → Check the 'channels' option against the data."
        )
    return samples.reshape(-1, channels)
