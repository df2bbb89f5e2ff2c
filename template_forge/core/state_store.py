"""
Typed key-value state with atomic updates and nestable transactions.

Values kept in the store are immutable (frozen pydantic records, ints,
bytes, strings), so a snapshot is a shallow copy of the key space and no
caller can mutate stored state through a reference it was handed.
"""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generic, Hashable, Iterator, List, Optional, Tuple, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class StateStore:
    """In-memory key-value state owned by the contract."""

    def __init__(self) -> None:
        self._data: Dict[Hashable, Any] = {}
        self._snapshots: List[Dict[Hashable, Any]] = []
        self.lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self.lock:
            return self._data.get(key, default)

    def set(self, key: Hashable, value: Any) -> None:
        with self.lock:
            self._data[key] = value

    def update(self, key: Hashable, func: Callable[[Any], Any], default: Any = None) -> Any:
        """Replace the value at key with func(current) and return the new value."""
        with self.lock:
            value = func(self._data.get(key, default))
            self._data[key] = value
            return value

    def compare_and_update(
        self, key: Hashable, func: Callable[[Any], Tuple[R, Any]], default: Any = None
    ) -> R:
        """Apply func(current) -> (result, new_value) atomically and return result."""
        with self.lock:
            result, value = func(self._data.get(key, default))
            self._data[key] = value
            return result

    @property
    def depth(self) -> int:
        """Number of open transactions."""
        return len(self._snapshots)

    @contextmanager
    def transaction(self) -> Iterator["StateStore"]:
        """All-or-nothing scope: any exception restores the state seen on entry."""
        with self.lock:
            self._snapshots.append(dict(self._data))
            try:
                yield self
            except BaseException:
                self._data = self._snapshots.pop()
                logger.debug("State rolled back", depth=self.depth)
                raise
            else:
                self._snapshots.pop()

    def mapper(self, *key: Hashable, default: Any = None) -> "ValueMapper[Any]":
        return ValueMapper(self, key, default)


class ValueMapper(Generic[T]):
    """Typed view of a single key."""

    def __init__(self, store: StateStore, key: Tuple[Hashable, ...], default: Optional[T] = None):
        self.store = store
        self.key = key
        self.default = default

    def __repr__(self) -> str:
        return f"ValueMapper({self.key!r})"

    def get(self) -> T:
        return self.store.get(self.key, self.default)

    def set(self, value: T) -> None:
        self.store.set(self.key, value)

    def is_empty(self) -> bool:
        return self.key not in self.store

    def update(self, func: Callable[[T], T]) -> T:
        return self.store.update(self.key, func, self.default)

    def compare_and_update(self, func: Callable[[T], Tuple[R, T]]) -> R:
        return self.store.compare_and_update(self.key, func, self.default)
