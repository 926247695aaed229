# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Parsed query string parameters.

``request.query`` is a ``QueryParams``. Indexing returns the last value of a
repeated parameter, matching what most clients expect from a flat mapping
(``?page=1&page=2`` → ``"2"``); ``getlist`` returns every value::

    params = QueryParams(b"name=john&tags=python&tags=web")
    params["name"]          # "john"
    params.getlist("tags")  # ["python", "web"]
    params.to_dict()        # {"name": "john", "tags": "web"}

Names are case-sensitive. Blank values are kept (``?key=`` → ``""``).
"""

from collections.abc import Mapping
from typing import Any, Iterator
from urllib.parse import parse_qs

__all__ = ["QueryParams", "query_params_from_scope"]


class QueryParams:
    """Query string parameters with multi-value support."""

    __slots__ = ("_params",)

    def __init__(self, query_string: bytes | str = b"") -> None:
        """
        Args:
            query_string: Raw query string. Bytes are decoded as Latin-1,
                          percent-escapes are decoded by ``parse_qs``.
        """
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self._params: dict[str, list[str]] = parse_qs(query_string, keep_blank_values=True)

    def get(self, key: str, default: str | None = None) -> str | None:
        values = self._params.get(key)
        if values:
            return values[-1]
        return default

    def getlist(self, key: str) -> list[str]:
        return list(self._params.get(key, []))

    def keys(self) -> list[str]:
        return list(self._params.keys())

    def items(self) -> list[tuple[str, str]]:
        return [(k, v[-1]) for k, v in self._params.items() if v]

    def multi_items(self) -> list[tuple[str, str]]:
        """Return every (name, value) pair, duplicates included."""
        return [(key, value) for key, values in self._params.items() for value in values]

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __bool__(self) -> bool:
        return bool(self._params)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryParams):
            return self._params == other._params
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"QueryParams({self._params!r})"


def query_params_from_scope(scope: Mapping[str, Any]) -> QueryParams:
    """Create QueryParams from an ASGI scope's ``query_string``."""
    return QueryParams(scope.get("query_string", b""))
