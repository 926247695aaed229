# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route table entries and path helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..types import RouteHandler

__all__ = ["MethodRoutes", "RouteEntry", "RouteMatch", "compile_path", "normalize_path"]

PARAM_PATTERN = "([^/]+)"


def normalize_path(path: str) -> str:
    """Canonical form of a route or base path.

    ``""`` and ``"/"`` become ``""``. Anything else gets a leading ``/`` and
    loses one trailing ``/``::

        normalize_path("api/")   # "/api"
        normalize_path("/a/b")   # "/a/b"
    """
    if path in ("", "/"):
        return ""
    normalized = path if path.startswith("/") else "/" + path
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def is_dynamic(path: str) -> bool:
    """True if any segment of path is a ``:name`` parameter."""
    return any(segment.startswith(":") for segment in path.split("/"))


def compile_path(path: str) -> tuple[re.Pattern[str], list[str]]:
    """Compile ``/users/:id/posts/:pid`` into an anchored regex.

    Each ``:name`` segment matches one non-empty span without ``/``;
    literal segments match themselves only.

    Returns:
        (pattern, parameter names in declaration order)
    """
    param_names: list[str] = []
    parts: list[str] = []
    for segment in path.split("/"):
        if segment.startswith(":"):
            param_names.append(segment[1:])
            parts.append(PARAM_PATTERN)
        else:
            parts.append(re.escape(segment))
    return re.compile("^" + "/".join(parts) + "$"), param_names


@dataclass(slots=True)
class RouteEntry:
    """A dynamic route: declared path, compiled matcher and parameter names."""

    path: str
    pattern: re.Pattern[str]
    param_names: list[str]
    handler: RouteHandler

    def match(self, path: str) -> dict[str, str] | None:
        """Bound parameters if path matches, else None."""
        found = self.pattern.match(path)
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups()))


@dataclass(slots=True)
class MethodRoutes:
    """Routes registered for one HTTP method."""

    static: dict[str, RouteHandler] = field(default_factory=dict)
    dynamic: list[RouteEntry] = field(default_factory=list)


@dataclass(slots=True)
class RouteMatch:
    """Handler selected for a request, with its path parameters."""

    handler: RouteHandler
    params: dict[str, str] = field(default_factory=dict)
