# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Attribute-access container for application-specific request extensions.

``ctx.payload.state`` is a ``State``. Middleware that needs to hand something
to handlers without a dedicated payload slot stores it here::

    ctx.payload.state.tenant = "acme"
    if "tenant" in ctx.payload.state:
        ...

Missing attributes raise ``AttributeError``, not ``KeyError``.
"""

from typing import Any

__all__ = ["State"]


class State:
    """Request-scoped attribute container backed by a dict."""

    __slots__ = ("_state",)

    def __init__(self, **initial: Any) -> None:
        object.__setattr__(self, "_state", dict(initial))

    def __setattr__(self, name: str, value: Any) -> None:
        self._state[name] = value

    def __getattr__(self, name: str) -> Any:
        try:
            return self._state[name]
        except KeyError:
            raise AttributeError(f"State has no attribute '{name}'") from None

    def __delattr__(self, name: str) -> None:
        try:
            del self._state[name]
        except KeyError:
            raise AttributeError(f"State has no attribute '{name}'") from None

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return name in self._state

    def get(self, name: str, default: Any = None) -> Any:
        return self._state.get(name, default)

    def __repr__(self) -> str:
        return f"State({self._state!r})"
