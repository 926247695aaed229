# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Case-insensitive, mutable HTTP request headers with multi-value support.

Purpose
=======
HTTP header names are case-insensitive per RFC 7230 and the same header can
appear several times. ASGI hands headers over as ``list[tuple[bytes, bytes]]``
in Latin-1. ``Headers`` decodes them once and stores names in lower case.

Every operation (lookup, set, append, delete) lower-cases the name it is
given, so there is exactly one canonical form in storage.

Processing Schema::

    [(b"Content-Type", b"application/json"), (b"X-Trace", b"a")]
                        ↓
    [("content-type", "application/json"), ("x-trace", "a")]
                        ↓
    headers.get("CONTENT-TYPE") → "application/json"

Mutation
========
Middleware may rewrite request headers before handlers see them
(e.g. a proxy-aware middleware replacing ``host``)::

    headers.set("x-user", "42")           # replaces all values
    headers.append("x-forwarded-for", ip) # adds one more value
    headers.getlist("x-forwarded-for")    # ["10.0.0.1", ip]
"""

from collections.abc import Iterable, Mapping
from typing import Any, Iterator

__all__ = ["Headers", "headers_from_scope"]


class Headers:
    """
    Case-insensitive HTTP headers, lower-case names, values preserved.

    Example:
        >>> headers = Headers([(b"Content-Type", b"application/json")])
        >>> headers.get("content-type")
        'application/json'
        >>> headers.append("Accept", "text/html")
        >>> headers.append("ACCEPT", "application/json")
        >>> headers.getlist("accept")
        ['text/html', 'application/json']
    """

    __slots__ = ("_headers",)

    def __init__(self, raw_headers: Iterable[tuple[bytes, bytes]] = ()) -> None:
        """
        Initialize Headers from raw ASGI headers.

        Args:
            raw_headers: (name, value) byte tuples, decoded as Latin-1.
        """
        self._headers: list[tuple[str, str]] = [
            (name.decode("latin-1").lower(), value.decode("latin-1"))
            for name, value in raw_headers
        ]

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the first value for a header, or default."""
        key_lower = key.lower()
        for name, value in self._headers:
            if name == key_lower:
                return value
        return default

    def getlist(self, key: str) -> list[str]:
        """Return all values for a header, empty list if missing."""
        key_lower = key.lower()
        return [value for name, value in self._headers if name == key_lower]

    def set(self, key: str, value: str | list[str]) -> None:
        """
        Replace every value of a header.

        Args:
            key: Header name (case-insensitive).
            value: A single value or a list of values.
        """
        key_lower = key.lower()
        self._headers = [(n, v) for n, v in self._headers if n != key_lower]
        values = value if isinstance(value, list) else [value]
        self._headers.extend((key_lower, v) for v in values)

    def append(self, key: str, value: str | list[str]) -> None:
        """
        Add value(s) to a header, keeping the existing ones.

        Args:
            key: Header name (case-insensitive).
            value: A single value or a list of values.
        """
        key_lower = key.lower()
        values = value if isinstance(value, list) else [value]
        self._headers.extend((key_lower, v) for v in values)

    def delete(self, key: str) -> None:
        """Remove a header. Missing headers are ignored."""
        key_lower = key.lower()
        self._headers = [(n, v) for n, v in self._headers if n != key_lower]

    def keys(self) -> list[str]:
        """Return unique header names in order of first occurrence."""
        seen: set[str] = set()
        result: list[str] = []
        for name, _ in self._headers:
            if name not in seen:
                seen.add(name)
                result.append(name)
        return result

    def items(self) -> list[tuple[str, str]]:
        """Return all (name, value) pairs including duplicates."""
        return list(self._headers)

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Return headers encoded back to ASGI form."""
        return [(n.encode("latin-1"), v.encode("latin-1")) for n, v in self._headers]

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        """Return total number of entries (including duplicates)."""
        return len(self._headers)

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"


def headers_from_scope(scope: Mapping[str, Any]) -> Headers:
    """Create Headers from an ASGI scope, empty if the scope has none."""
    return Headers(scope.get("headers", []))
