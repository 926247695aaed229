# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Dispatcher - runs a Context through an ordered middleware list.

Each call builds a fresh continuation chain: middleware ``i`` receives a
``next`` that runs middleware ``i + 1``. Past the last entry ``next()``
returns without doing anything. A ``next`` may be awaited once; a second
call raises ``RuntimeError``.

Stack depth grows by one frame pair per middleware, never more.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .middleware import BaseMiddleware, as_middleware

if TYPE_CHECKING:
    from .context import Context
    from .types import Next

__all__ = ["Dispatcher"]


class Dispatcher:
    """Continuation-passing executor for a middleware list."""

    __slots__ = ("middlewares",)

    def __init__(self, middlewares: Iterable[Any] = ()) -> None:
        self.middlewares: list[BaseMiddleware] = [as_middleware(m) for m in middlewares]

    def add(self, middleware: Any) -> None:
        """Append a middleware (object with ``handle`` or ``async def fn(ctx, next)``)."""
        self.middlewares.append(as_middleware(middleware))

    async def __call__(self, ctx: Context) -> None:
        await self._run(ctx, 0)

    async def _run(self, ctx: Context, index: int) -> None:
        if index >= len(self.middlewares):
            return
        await self.middlewares[index].handle(ctx, self._continuation(ctx, index + 1))

    def _continuation(self, ctx: Context, index: int) -> Next:
        called = False

        async def next() -> None:
            nonlocal called
            if called:
                raise RuntimeError("next() called multiple times")
            called = True
            await self._run(ctx, index)

        return next

    def __len__(self) -> int:
        return len(self.middlewares)

    def __repr__(self) -> str:
        return f"Dispatcher({self.middlewares!r})"
