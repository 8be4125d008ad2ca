"""Addresses and IPv4 wildcard patterns that are never blocked."""

from __future__ import annotations

from collections.abc import Iterable

_KEY_LIMIT = 127


def _octets(ip: str) -> list[str]:
    """Split *ip* into four dotted parts; over-long parts and missing ones are empty."""
    parts = [part for part in ip.split(".") if part][:4]
    octets = [part if len(part) <= 3 else "" for part in parts]
    return octets + [""] * (4 - len(octets))


class Whitelist:
    """A set of exact addresses and ``a.*.*.*``, ``a.b.*.*``, ``a.b.c.*`` patterns."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: set[str] = set()
        for entry in entries:
            self.add(entry)

    def add(self, entry: str) -> None:
        """Add an exact address or a wildcard pattern."""
        self._entries.add(entry[:_KEY_LIMIT])

    def candidates(self, ip: str) -> tuple[str, str, str, str]:
        """Return the keys looked up for *ip*: exact, then three wildcard levels."""
        first, second, third, _ = _octets(ip)
        return (
            ip[:_KEY_LIMIT],
            f"{first}.*.*.*",
            f"{first}.{second}.*.*",
            f"{first}.{second}.{third}.*",
        )

    def __contains__(self, ip: object) -> bool:
        if not isinstance(ip, str):
            return False
        return any(key in self._entries for key in self.candidates(ip))

    def __len__(self) -> int:
        return len(self._entries)