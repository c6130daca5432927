"""Least-recently-used map.

`LruMap` is a mutable mapping that remembers the order in which its keys were
last inserted, updated, or read, and drops the least recently used entry once
it grows past `maximum_size`.

Reads that go through `m[key]`, `get`, `put_if_absent` or `setdefault`
promote the key. Membership tests, `peek`, iteration and the `keys()`,
`values()` and `items()` views never do. All iteration runs from the most
recently used entry to the least recently used one.

Not thread-safe.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import (
    Callable,
    ItemsView,
    Iterable,
    Iterator,
    KeysView,
    Mapping,
    MutableMapping,
    ValuesView,
)
from typing import Any, TypeVar, overload

from lrumap.config import LruMapConfig, validate_maximum_size

logger = logging.getLogger("lrumap.lru_map")

K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")

_MISSING: Any = object()


class LruKeysView(KeysView[K]):
    """Live view of an `LruMap`'s keys, MRU first. Iterating does not promote."""

    __slots__ = ()

    _mapping: LruMap[K, Any]

    def __iter__(self) -> Iterator[K]:
        return reversed(self._mapping._entries)

    def __reversed__(self) -> Iterator[K]:
        return iter(self._mapping._entries)


class LruValuesView(ValuesView[V]):
    """Live view of an `LruMap`'s values, MRU first. Iterating does not promote."""

    __slots__ = ()

    _mapping: LruMap[Any, V]

    def __iter__(self) -> Iterator[V]:
        return reversed(self._mapping._entries.values())

    def __reversed__(self) -> Iterator[V]:
        return iter(self._mapping._entries.values())

    def __contains__(self, value: object) -> bool:
        return self._mapping.contains_value(value)


class LruItemsView(ItemsView[K, V]):
    """Live view of an `LruMap`'s `(key, value)` pairs, MRU first. Iterating does not promote."""

    __slots__ = ()

    _mapping: LruMap[K, V]

    def __iter__(self) -> Iterator[tuple[K, V]]:
        return reversed(self._mapping._entries.items())

    def __reversed__(self) -> Iterator[tuple[K, V]]:
        return iter(self._mapping._entries.items())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        key, value = item
        stored = self._mapping._entries.get(key, _MISSING)
        if stored is _MISSING:
            return False
        return stored is value or stored == value


class LruMap(MutableMapping[K, V]):
    """A mapping bounded to `maximum_size` entries with least-recently-used eviction.

    `initial_entries` (a mapping or an iterable of pairs) is inserted in
    iteration order, so its last pair ends up most recently used. When a
    bound is given, inserting past it evicts from the least recently used
    end, one entry at a time.

    `maximum_size=None` means unbounded. Zero, negative and non-integer
    bounds raise `LruMapConfigError`.
    """

    def __init__(
        self,
        initial_entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
        *,
        maximum_size: int | None = None,
    ) -> None:
        # Front is the LRU end, back is the MRU end.
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._maximum_size = validate_maximum_size(maximum_size)
        if initial_entries is not None:
            self.update(initial_entries)

    @classmethod
    def from_config(
        cls,
        config: LruMapConfig,
        initial_entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
    ) -> LruMap[K, V]:
        """Build a map using the settings in `config`."""

        return cls(initial_entries, maximum_size=config.maximum_size)

    # -- capacity ---------------------------------------------------------

    @property
    def maximum_size(self) -> int | None:
        """The entry-count bound, or None when unbounded.

        Lowering it below `len(self)` evicts least recently used entries until
        the map fits. An invalid value raises `LruMapConfigError` and leaves
        the map and its previous bound untouched.
        """

        return self._maximum_size

    @maximum_size.setter
    def maximum_size(self, value: int | None) -> None:
        new_size = validate_maximum_size(value)
        old_size = self._maximum_size
        self._maximum_size = new_size
        logger.debug("maximum_size changed from %s to %s (len=%d)", old_size, new_size, len(self))
        self._evict_overflow()

    def _evict_overflow(self) -> None:
        if self._maximum_size is None:
            return
        while len(self._entries) > self._maximum_size:
            key, _value = self._entries.popitem(last=False)
            logger.debug("Evicted least recently used key %r (maximum_size=%d)", key, self._maximum_size)

    # -- promoting access -------------------------------------------------

    def __getitem__(self, key: K) -> V:
        value = self._entries[key]
        self._entries.move_to_end(key)
        return value

    @overload
    def get(self, key: K) -> V | None: ...

    @overload
    def get(self, key: K, default: V | T) -> V | T: ...

    def get(self, key: K, default: Any = None) -> Any:
        """Return the value for `key` and mark it most recently used, or `default` if absent."""

        if key not in self._entries:
            return default
        self._entries.move_to_end(key)
        return self._entries[key]

    def __setitem__(self, key: K, value: V) -> None:
        if key in self._entries:
            self._entries[key] = value
            # No-op when `key` is already the MRU entry.
            self._entries.move_to_end(key)
            return
        self._entries[key] = value
        self._evict_overflow()

    def update(self, other: Any = (), /, **kwds: V) -> None:
        """Insert pairs in iteration order; eviction applies after each one."""

        if isinstance(other, Mapping):
            pairs: Iterable[tuple[K, V]] = other.items()
        elif hasattr(other, "keys"):
            pairs = ((key, other[key]) for key in other.keys())
        else:
            pairs = other
        if other is self:
            pairs = list(pairs)
        for key, value in pairs:
            self[key] = value
        for key, value in kwds.items():
            self[key] = value  # type: ignore[index]

    def put_if_absent(self, key: K, value_factory: Callable[[], V]) -> V:
        """Return the value for `key`, inserting `value_factory()` if it is absent.

        An existing key is promoted and `value_factory` is not called. For an
        absent key the factory is called exactly once, before the map is
        touched, so an exception from it leaves the map unchanged.
        """

        if key in self._entries:
            self._entries.move_to_end(key)
            return self._entries[key]
        value = value_factory()
        self[key] = value
        return value

    def setdefault(self, key: K, default: V = None) -> V:  # type: ignore[assignment]
        return self.put_if_absent(key, lambda: default)

    # -- removal ----------------------------------------------------------

    def __delitem__(self, key: K) -> None:
        del self._entries[key]

    def remove(self, key: K) -> V | None:
        """Remove `key` and return its value, or None if it was not present."""

        return self._entries.pop(key, None)

    def pop(self, key: K, default: Any = _MISSING) -> Any:
        if default is _MISSING:
            return self._entries.pop(key)
        return self._entries.pop(key, default)

    def popitem(self) -> tuple[K, V]:
        """Remove and return the least recently used `(key, value)` pair.

        Raises `KeyError` if the map is empty.
        """

        if not self._entries:
            raise KeyError("popitem(): LruMap is empty")
        return self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    # -- non-promoting access ---------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def contains_value(self, value: object) -> bool:
        return any(v is value or v == value for v in self._entries.values())

    def peek(self, key: K, default: Any = None) -> Any:
        """Return the value for `key` without changing its position."""

        return self._entries.get(key, default)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return reversed(self._entries)

    def __reversed__(self) -> Iterator[K]:
        return iter(self._entries)

    def keys(self) -> LruKeysView[K]:
        return LruKeysView(self)

    def values(self) -> LruValuesView[V]:
        return LruValuesView(self)

    def items(self) -> LruItemsView[K, V]:
        return LruItemsView(self)

    def for_each(self, visitor: Callable[[K, V], object]) -> None:
        """Call `visitor(key, value)` for every entry, most recently used first."""

        for key, value in reversed(self._entries.items()):
            visitor(key, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r}, maximum_size={self._maximum_size!r})"
