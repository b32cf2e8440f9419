"""
Interval resolution.

Selection calls accept ``(time, duration, options)`` in several shapes.
``parse_call`` settles the shape once into a ``CallForm``; ``resolve_interval``
turns a ``CallForm`` into a ``SelectionDTO`` for a concrete buffer without
looking at argument types again.

Option keys understood by the resolver:

    from, to          seconds, override ``time`` / ``time + duration``
    length            frames, overrides ``duration``
    duration          seconds, overrides ``duration``
    start, end        frames, override everything above
    channel(s)        int or sequence of channel indices
    format, dtype     sample format of the selection (``dtype`` wins)

Anything else is passed through in ``SelectionDTO.extra``.

A negative duration selects backward from the start, so its bounds are
reordered. An explicit ``end`` that lands before the start is an error.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from application.dto.selection_dto import SelectionDTO
from audiokit.errors import InvalidArgument
from audiokit.utils import is_numeric

RESOLVER_KEYS: set[str] = {
    "from", "to", "start", "end", "length", "duration",
    "channels", "channel", "format", "dtype",
}


@dataclass(frozen=True)
class CallForm:
    """Positional arguments of a selection call after overload dispatch."""
    time: Optional[float] = None
    duration: Optional[float] = None
    options: Mapping = field(default_factory=dict)


def parse_call(time: Any = None, duration: Any = None, options: Any = None) -> CallForm:
    """Dispatch the overloaded ``(time, duration, options)`` convention."""
    if time is None and duration is None and options is None:
        return CallForm(0, None, {})

    if time is not None and duration is None and options is None:
        if not is_numeric(time):
            return CallForm(0, None, _as_options(time))
        return CallForm(time, None, {})

    if time is not None and duration is not None and options is None:
        if is_numeric(duration):
            return CallForm(_as_seconds(time, "time"), duration, {})
        return CallForm(_as_seconds(time, "time"), None, _as_options(duration))

    return CallForm(
        None if time is None else _as_seconds(time, "time"),
        None if duration is None else _as_seconds(duration, "duration"),
        {} if options is None else _as_options(options),
    )


def resolve_interval(
    form: CallForm,
    *,
    buffer_length: int,
    sample_rate: int,
    channels: int,
) -> SelectionDTO:
    """
    Materialize *form* against a buffer.

    Args:
        form:          Dispatched call arguments.
        buffer_length: Frames in the buffer being addressed.
        sample_rate:   Sample rate of that buffer in Hz.
        channels:      Channel count of that buffer.

    Returns:
        A selection with ``0 <= start <= end <= buffer_length`` whose time
        fields agree with its frame fields at *sample_rate*.
    """
    options: dict = dict(form.options)

    time: float = 0 if form.time is None else form.time
    duration: float = buffer_length / sample_rate if form.duration is None else form.duration

    # negative zero addresses the end of the buffer
    if not time and duration < 0:
        time = -0.0

    selected: tuple = _normalize_channels(options, channels)

    if options.get("from") is not None:
        time = options["from"]
    if options.get("to") is not None:
        duration = options["to"] - time
    if options.get("length") is not None:
        duration = options["length"] / sample_rate
    if options.get("duration") is not None:
        duration = options["duration"]

    if options.get("start") is None:
        start: int = _from_end(time * sample_rate, buffer_length)
    else:
        start = _from_end(options["start"], buffer_length)

    if options.get("end") is None:
        span: float = duration * sample_rate
        if span < 0:
            # selects backward from start
            end: int = max(to_frames(start + span), 0)
        else:
            end = min(to_frames(start + span), buffer_length)
    else:
        end = _from_end(options["end"], buffer_length)

    start = _clamp(start, buffer_length)
    end = _clamp(end, buffer_length)
    if end < start:
        if options.get("end") is not None:
            raise InvalidArgument(
                f"Selection ends before it starts: start={start}, end={end}.\n"
                f"    → Swap the bounds, or select backward with a negative duration."
            )
        start, end = end, start

    fmt: Optional[str] = options.get("dtype") or options.get("format")
    extra: dict = {k: v for k, v in options.items() if k not in RESOLVER_KEYS}

    return SelectionDTO(
        start=start,
        end=end,
        length=end - start,
        from_=start / sample_rate,
        to=end / sample_rate,
        duration=(end - start) / sample_rate,
        channels=selected,
        format=fmt,
        extra=extra,
    )


def to_frames(value: float) -> int:
    """Floor a frame position, rounding first so 0.29 * 100 lands on frame 29, not 28."""
    return math.floor(round(value, 9))


# ── Internal ─────────────────────────────────────────────────────

def _as_options(value: Any) -> dict:
    if not isinstance(value, Mapping):
        raise InvalidArgument(
            f"Expected a number of seconds or an options mapping. Got: {type(value).__name__}.\n"
            f"    → Example: audio.slice(1.5, {{'channels': [0]}})"
        )
    return dict(value)


def _as_seconds(value: Any, name: str) -> float:
    if not is_numeric(value):
        raise InvalidArgument(
            f"Parameter '{name}' must be a number of seconds. Got: {value!r}."
        )
    return value


def _is_negative(value: float) -> bool:
    return value < 0 or (value == 0 and math.copysign(1.0, value) < 0)


def _from_end(offset: float, buffer_length: int) -> int:
    """Floor *offset* to a frame; negative offsets (negative zero too) count from the end."""
    frames: int = to_frames(offset)
    if _is_negative(offset):
        return buffer_length + frames
    return frames


def _clamp(frame: int, buffer_length: int) -> int:
    return min(max(frame, 0), buffer_length)


def _normalize_channels(options: dict, count: int) -> tuple:
    if options.get("channel") is not None:
        options["channels"] = options.pop("channel")

    value: Any = options.get("channels")
    if value is None:
        return tuple(range(count))
    if is_numeric(value):
        value = [value]
    if isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, np.ndarray)):
        raise InvalidArgument(
            f"Bad `channels` argument: {value!r}.\n"
            f"    → Pass a channel index or a list of indices, e.g. [0, 1]."
        )

    selected: tuple = tuple(_channel_index(c) for c in value)
    if not selected:
        raise InvalidArgument("Bad `channels` argument: at least one channel is required.")
    if len(set(selected)) != len(selected):
        raise InvalidArgument(f"Bad `channels` argument: duplicate indices in {list(selected)}.")
    for c in selected:
        if not 0 <= c < count:
            raise InvalidArgument(
                f"Channel {c} is out of range for {count}-channel audio.\n"
                f"    → Use indices between 0 and {count - 1}."
            )
    return selected


def _channel_index(value: Any) -> int:
    if not is_numeric(value) or not float(value).is_integer():
        raise InvalidArgument(
            f"Bad `channels` argument: {value!r} is not a channel index.\n"
            f"    → Channel indices are whole numbers, e.g. [0, 1]."
        )
    return int(value)
