"""Named timestamp tree: a chained hash table of timestamped hit counters."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator
from dataclasses import dataclass

PRIMES: tuple[int, ...] = (
    53, 97, 193, 389, 769,
    1543, 3079, 6151, 12289, 24593,
    49157, 98317, 196613, 393241, 786433,
    1572869, 3145739, 6291469, 12582917, 25165843,
    50331653, 100663319, 201326611, 402653189, 805306457,
    1610612741, 3221225473, 4294967291,
)

_ULONG_MASK = (1 << 64) - 1


def table_size_for(size: int) -> int:
    """Return the smallest table prime that is not below *size*."""
    index = bisect_left(PRIMES, size)
    if index == len(PRIMES):
        raise ValueError(f"hash table size {size} exceeds the largest supported size {PRIMES[-1]}")
    return PRIMES[index]


@dataclass
class Node:
    """One entry of the tree: a key with the time it was last seen and a hit count."""

    key: str
    timestamp: float
    count: int = 0


class NamedTimestampTree:
    """Hash table of :class:`Node` entries chained per bucket.

    The number of buckets is rounded up to a prime from :data:`PRIMES`.
    Iteration visits buckets in index order and, within a bucket, entries
    in the order they were inserted.
    """

    def __init__(self, size: int) -> None:
        self.size = table_size_for(size)
        self._buckets: dict[int, list[Node]] = {}
        self._items = 0

    def hashcode(self, key: str) -> int:
        """Return the bucket index of *key*."""
        val = 0
        for byte in key.encode("utf-8", "surrogateescape"):
            signed = byte - 256 if byte > 127 else byte
            val = (5 * val + signed) & _ULONG_MASK
        return val % self.size

    def find(self, key: str) -> Node | None:
        """Return the node stored under *key*, or None."""
        for node in self._buckets.get(self.hashcode(key), ()):
            if node.key == key:
                return node
        return None

    def insert(self, key: str, timestamp: float) -> Node:
        """Store *key* with *timestamp* and a zero count, reusing an existing node."""
        bucket = self._buckets.setdefault(self.hashcode(key), [])
        for node in bucket:
            if node.key == key:
                node.timestamp = timestamp
                node.count = 0
                return node
        node = Node(key, timestamp)
        bucket.append(node)
        self._items += 1
        return node

    def delete(self, key: str) -> None:
        """Remove *key*; raise KeyError if it is not present."""
        index = self.hashcode(key)
        bucket = self._buckets.get(index)
        if bucket is not None:
            for position, node in enumerate(bucket):
                if node.key == key:
                    del bucket[position]
                    if not bucket:
                        del self._buckets[index]
                    self._items -= 1
                    return
        raise KeyError(key)

    def clear(self) -> None:
        """Remove every entry."""
        self._buckets.clear()
        self._items = 0

    def __iter__(self) -> Iterator[Node]:
        for index in sorted(self._buckets):
            yield from tuple(self._buckets.get(index, ()))

    def __len__(self) -> int:
        return self._items

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) is not None