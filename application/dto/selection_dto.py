# application/dto/selection_dto.py
# Canonical (start, end, channels) selection produced by the interval resolver.

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class SelectionDTO:
    """Frame range and channel set of one selection call."""
    start: int
    end: int
    length: int
    from_: float
    to: float
    duration: float
    channels: Tuple[int, ...]
    format: Optional[str] = None
    extra: dict = field(default_factory=dict)

