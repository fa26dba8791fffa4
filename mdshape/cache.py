"""Bounded LRU cache of parse results.

Concurrency contract: one re-entrant lock guards the whole of ``get_or_put``,
including the call to ``parse``. Misses are serialized across all keys of a
cache instance, and concurrent misses for the same key and input parse
exactly once. ``clear`` takes the same lock, so it never observes a
half-updated map.
"""

import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from loguru import logger

from mdshape.config import DEFAULT_PARSE_CACHE_SIZE, require_positive_int

T = TypeVar("T")


@dataclass(frozen=True)
class _CachedParse(Generic[T]):
    input: str
    result: T


class ParseCache(Generic[T]):
    """Bounded LRU of parse results keyed by caller key, valid only for the same input.

    ``parse`` runs with the lock held. It may call back into this cache from
    the same thread (the lock is an ``RLock``); waiting on another thread that
    uses this cache from inside ``parse`` deadlocks.
    """

    def __init__(self, max_entries: int = DEFAULT_PARSE_CACHE_SIZE) -> None:
        self.max_entries = require_positive_int("max_entries", max_entries)
        self._entries: OrderedDict[Hashable, _CachedParse[T]] = OrderedDict()
        self._lock = threading.RLock()

    def get_or_put(
        self,
        key: Hashable,
        input: str,
        parse: Callable[[], T],
        store_if: Callable[[T], bool] | None = None,
    ) -> T:
        """Return the cached result for ``key`` if it was produced from ``input``, else parse.

        A hit refreshes the entry's recency. On a miss the new result replaces
        whatever ``key`` held, unless ``store_if`` rejects it, and the least
        recently used entries are evicted down to ``max_entries``.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.input == input:
                self._entries.move_to_end(key)
                return entry.result

            result = parse()
            if store_if is not None and not store_if(result):
                return result

            self._entries.pop(key, None)
            self._entries[key] = _CachedParse(input=input, result=result)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Parse cache full ({self.max_entries}), evicted {evicted!r}")
            return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries
