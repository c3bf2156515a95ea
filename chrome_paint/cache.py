"""Memo for computed shades.

A single process-wide :class:`ShadeCache` is created lazily on first use and
lives until the interpreter exits.  Tests and embedding code may swap it via
:func:`set_default_cache` or pass their own instance to the shade functions.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, Hashable, NamedTuple, Optional, TypeVar

from . import config

T = TypeVar("T")


class CacheStats(NamedTuple):
    hits: int
    misses: int
    size: int


class ShadeCache:
    """Thread-safe ``key -> value`` memo with an optional LRU bound.

    ``compute`` runs outside the lock, so two threads missing on the same key
    may both compute it; the value is deterministic so the later store is
    harmless.
    """

    def __init__(self, maxsize: Optional[int] = None) -> None:
        if maxsize is not None and maxsize <= 0:
            raise ValueError("maxsize must be > 0 or None")
        self.maxsize = maxsize
        self._entries: "OrderedDict[Hashable, object]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, key: Hashable, compute: Callable[[], T]) -> T:
        with self._lock:
            if key in self._entries:
                self._hits += 1
                if self.maxsize is not None:
                    self._entries.move_to_end(key)
                return self._entries[key]  # type: ignore[return-value]

        value = compute()

        with self._lock:
            self._misses += 1
            self._entries[key] = value
            if self.maxsize is not None:
                self._entries.move_to_end(key)
                while len(self._entries) > self.maxsize:
                    self._entries.popitem(last=False)
        return value

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(self._hits, self._misses, len(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0


_DEFAULT: Optional[ShadeCache] = None
_DEFAULT_LOCK = threading.Lock()


def default_cache() -> ShadeCache:
    """Return the process-wide cache, creating it on first use."""
    global _DEFAULT
    if _DEFAULT is None:
        with _DEFAULT_LOCK:
            if _DEFAULT is None:
                _DEFAULT = ShadeCache(config.SHADE_CACHE_SIZE)
                logging.debug(
                    "shade cache created maxsize=%s", config.SHADE_CACHE_SIZE
                )
    return _DEFAULT


def set_default_cache(cache: Optional[ShadeCache]) -> None:
    """Replace the process-wide cache; ``None`` recreates it lazily."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = cache


def shade_cache_stats() -> CacheStats:
    return default_cache().stats()
