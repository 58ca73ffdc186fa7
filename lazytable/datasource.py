"""Indexable row sources consumed by the virtual list.

``InMemoryDataSource`` wraps a fixed sequence; ``LazyDataSource`` fetches rows
on demand and memoizes them by index. Both keep ``size`` fixed for their
lifetime.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


class OutOfRange(IndexError):
    """Raised for row indexes outside ``[0, size)``."""


class DataSource(Generic[T]):
    """Read-only row access: ``size``, ``get`` and ``get_range``."""

    @property
    def size(self) -> int:
        raise NotImplementedError

    def get(self, index: int) -> T:
        raise NotImplementedError

    def get_range(self, start: int, count: int) -> list[T]:
        raise NotImplementedError

    def __len__(self) -> int:
        return self.size

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise OutOfRange(f"index {index} out of bounds for size {self.size}")

    def _clamped_count(self, start: int, count: int) -> int:
        """Number of rows ``get_range(start, count)`` returns."""
        if start < 0:
            raise OutOfRange(f"range start {start} is negative")
        if start >= self.size or count <= 0:
            return 0
        return min(count, self.size - start)


class InMemoryDataSource(DataSource[T]):
    """Rows backed by an ordered collection captured at construction."""

    def __init__(self, rows: Iterable[T]) -> None:
        self._rows: tuple[T, ...] = tuple(rows)

    @property
    def size(self) -> int:
        return len(self._rows)

    def get(self, index: int) -> T:
        self._check_index(index)
        return self._rows[index]

    def get_range(self, start: int, count: int) -> list[T]:
        n = self._clamped_count(start, count)
        return list(self._rows[start : start + n])


class LazyDataSource(DataSource[T]):
    """Rows produced by ``fetcher(offset, limit)`` and cached by index.

    The fetcher may return fewer rows than requested; extra rows beyond the
    requested window are ignored.
    """

    def __init__(self, size: int, fetcher: Callable[[int, int], Sequence[T]]) -> None:
        if size < 0:
            raise ValueError("size must be >= 0")
        self._size = size
        self._fetcher = fetcher
        self._cache: dict[int, T] = {}
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    @property
    def cached_count(self) -> int:
        return len(self._cache)

    def get(self, index: int) -> T:
        self._check_index(index)
        with self._lock:
            if index in self._cache:
                return self._cache[index]
        results = list(self._fetcher(index, 1))
        if not results:
            raise LookupError(f"fetcher returned no row for index {index}")
        row = results[0]
        with self._lock:
            self._cache[index] = row
        return row

    def get_range(self, start: int, count: int) -> list[T]:
        n = self._clamped_count(start, count)
        if n == 0:
            return []
        indexes = range(start, start + n)
        with self._lock:
            if all(i in self._cache for i in indexes):
                return [self._cache[i] for i in indexes]
        results = list(self._fetcher(start, n))[:n]
        with self._lock:
            for offset, row in enumerate(results):
                self._cache[start + offset] = row
        return results

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
