# audiokit/cache.py
# Load cache: at most one fetch per resource key, a fresh clone per caller.

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class Pending:
    """Fetch in flight; every waiter gets its own clone when it lands."""
    waiters: List[asyncio.Future] = field(default_factory=list)
    task: Optional[asyncio.Task] = None


@dataclass
class Resolved:
    audio: Any


@dataclass
class Failed:
    error: BaseException


CacheEntry = Union[Pending, Resolved, Failed]


class LoadCache:
    """
    Map from resolved resource key (absolute path or URL) to loaded audio.

    Entries are never evicted. A failed fetch stays cached as ``Failed``, so
    later loads of the same key fail without fetching again.

    Cached objects must provide ``clone()``; callers only ever receive clones.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def fetch(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> asyncio.Future:
        """
        Return a future for a clone of the audio stored under *key*.

        On a miss the ``Pending`` entry is registered before *fetch* is
        scheduled, so loads issued in the same tick share one fetch.
        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future = loop.create_future()
        entry: Optional[CacheEntry] = self._entries.get(key)

        if isinstance(entry, Pending):
            logger.debug("cache pending, following key=%s", key)
            entry.waiters.append(waiter)
        elif isinstance(entry, Resolved):
            logger.debug("cache hit key=%s", key)
            waiter.set_result(entry.audio.clone())
        elif isinstance(entry, Failed):
            logger.debug("cache holds failure key=%s", key)
            waiter.set_exception(entry.error)
        else:
            logger.debug("cache miss key=%s", key)
            pending = Pending(waiters=[waiter])
            self._entries[key] = pending
            pending.task = loop.create_task(self._settle(key, pending, fetch))

        return waiter

    async def _settle(
        self,
        key: str,
        pending: Pending,
        fetch: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            audio: Any = await fetch()
        except Exception as exc:
            logger.error("load failed key=%s: %s", key, exc)
            self._entries[key] = Failed(exc)
            for waiter in pending.waiters:
                if not waiter.done():
                    waiter.set_exception(exc)
            return

        self._entries[key] = Resolved(audio)
        # Abandoned (cancelled) waiters are skipped; the entry is cached regardless
        for waiter in pending.waiters:
            if not waiter.done():
                waiter.set_result(audio.clone())
