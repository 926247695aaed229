# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Middleware package - the ``handle(ctx, next)`` contract and built-ins.

A middleware receives the request Context and a zero-argument continuation.
It may act before and/or after awaiting ``next()``, or skip it to
short-circuit the rest of the chain::

    class Timing(BaseMiddleware):
        async def handle(self, ctx: Context, next: Next) -> None:
            start = time.perf_counter()
            await next()
            elapsed = time.perf_counter() - start
            ctx.payload.state.elapsed = elapsed

Plain coroutine functions with the same signature are accepted too and
wrapped in ``FunctionMiddleware`` by ``as_middleware``.

Built-in middleware register themselves by ``middleware_name`` so the server
can build them from configuration. ``middleware_order`` fixes their position
(lower = earlier in the chain):

    100: errors   (ExceptionHandler, always on)
    150: body     (BodyParser, always on)
    200: logging  (RequestLogger)
    300: cors     (CORSMiddleware)
    400: auth     (JWTGuard)

User middleware added with ``NanoServer.add()`` runs after all of them, in
the order it was added.
"""

from __future__ import annotations

import importlib
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..utils import parse_enabled

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next

MIDDLEWARE_REGISTRY: dict[str, type["BaseMiddleware"]] = {}

logger = logging.getLogger("nano_asgi.middleware")


class BaseMiddleware(ABC):
    """Base class for middleware.

    Subclasses that set ``middleware_name`` in their own class body are added
    to ``MIDDLEWARE_REGISTRY`` and can be enabled from configuration.

    Class attributes:
        middleware_name: Registry key. Empty means not registered.
        middleware_order: Position among configured middleware.
        middleware_default: Enabled when the configuration does not say.
    """

    middleware_name: str = ""
    middleware_order: int = 500
    middleware_default: bool = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        name = cls.__dict__.get("middleware_name")
        if not name:
            return
        if name in MIDDLEWARE_REGISTRY:
            raise ValueError(f"Middleware name '{name}' already registered")
        MIDDLEWARE_REGISTRY[name] = cls

    @classmethod
    def from_config(cls, options: Mapping[str, Any]) -> BaseMiddleware:
        """Build an instance from a configuration section."""
        return cls(**options)

    @abstractmethod
    async def handle(self, ctx: Context, next: Next) -> None: ...


class FunctionMiddleware(BaseMiddleware):
    """Adapter for ``async def fn(ctx, next)`` middleware."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[[Context, Next], Awaitable[None]]) -> None:
        self.func = func

    async def handle(self, ctx: Context, next: Next) -> None:
        await self.func(ctx, next)

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"FunctionMiddleware({name})"


def as_middleware(obj: Any) -> BaseMiddleware:
    """Return obj as a middleware.

    Objects with a ``handle`` method are used as they are; other callables
    are wrapped in ``FunctionMiddleware``.

    Raises:
        TypeError: obj is neither.
    """
    if isinstance(obj, BaseMiddleware) or callable(getattr(obj, "handle", None)):
        return obj
    if callable(obj):
        return FunctionMiddleware(obj)
    raise TypeError(f"{obj!r} is not a middleware")


def _autodiscover() -> None:
    """Import all middleware modules in this package to trigger registration."""
    package_dir = Path(__file__).parent
    for py_file in sorted(package_dir.glob("*.py")):
        if py_file.name.startswith("_"):
            continue
        importlib.import_module(f".{py_file.stem}", __package__)


def build_middlewares(
    middleware_config: Mapping[str, Any] | None = None,
    sections: Mapping[str, Any] | None = None,
) -> list[BaseMiddleware]:
    """Instantiate registered middleware from configuration.

    Args:
        middleware_config: ``{name: on/off}``. Names not listed fall back to
            the class ``middleware_default``.
        sections: Full configuration; the ``[<name>]`` section, if present,
            is passed to the class ``from_config``.

    Returns:
        Enabled middleware, sorted by ``middleware_order``.

    Example TOML::

        [middleware]
        logging = "on"
        cors = "on"

        [cors]
        origins = ["https://example.com"]
    """
    toggles = {name: parse_enabled(value) for name, value in (middleware_config or {}).items()}
    for name in toggles:
        if name not in MIDDLEWARE_REGISTRY:
            logger.warning(f"Unknown middleware '{name}' in configuration, ignored")

    enabled: list[tuple[int, str, type[BaseMiddleware]]] = []
    for name, cls in MIDDLEWARE_REGISTRY.items():
        if toggles.get(name, cls.middleware_default):
            enabled.append((cls.middleware_order, name, cls))
    enabled.sort(key=lambda item: item[0])

    result: list[BaseMiddleware] = []
    for _order, name, cls in enabled:
        options = (sections or {}).get(name) or {}
        result.append(cls.from_config(options))
    return result


_autodiscover()
globals().update({cls.__name__: cls for cls in MIDDLEWARE_REGISTRY.values()})

__all__ = [
    "BaseMiddleware",
    "FunctionMiddleware",
    "MIDDLEWARE_REGISTRY",
    "as_middleware",
    "build_middlewares",
    *(cls.__name__ for cls in MIDDLEWARE_REGISTRY.values()),
]
