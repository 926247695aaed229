# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Small helpers shared by middleware, router and config.

Exports:
    split_and_strip: Split comma-separated string and strip whitespace.
    parse_enabled: Parse on/off/true/false config values.
    invoke: Call a sync or async callable and await the result if needed.
"""

from __future__ import annotations

import inspect
from typing import Any


def split_and_strip(
    value: str | list[str] | tuple[str, ...] | None, default: list[str] | None = None
) -> list[str]:
    """Split comma-separated string and strip whitespace from each item.

    If value is already a list, returns a copy. If None, returns default.

    Examples:
        split_and_strip("a, b, c")  # ["a", "b", "c"]
        split_and_strip(["x", "y"])  # ["x", "y"]
        split_and_strip(None, ["default"])  # ["default"]
    """
    if value is None:
        return list(default) if default is not None else []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return list(value)


def parse_enabled(value: Any) -> bool:
    """Parse on/off/true/false value to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("on", "true", "yes", "1")
    return bool(value)


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call func and await the result if it is awaitable.

    Route handlers and lifespan hooks may be ``def`` or ``async def``.
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


__all__ = ["invoke", "parse_enabled", "split_and_strip"]
