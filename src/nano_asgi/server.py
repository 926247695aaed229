# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ASGI Server - main entry point for nano-asgi applications.

NanoServer is the ASGI application that:
- Builds the configured built-in middleware (errors, body, logging, cors, auth)
- Accepts user middleware and routers with ``add()``
- Builds one Context per HTTP request and runs it through the Dispatcher
- Handles ASGI lifespan protocol (startup/shutdown hooks)
- Closes websocket connections (not supported)

Usage:
    from nano_asgi import NanoServer, Router

    router = Router()
    router.get("/ping", lambda ctx: ctx.response.json({"pong": True}))

    server = NanoServer()
    server.add(router)
    server.run()  # Starts uvicorn

Safety net:
    The exception handler middleware answers every failure it sees. The
    server itself only steps in when nothing answered:
    - chain finished without a response: 404 ``{"message": "Not Found"}``
    - a failure escaped the chain: 500 ``{"message": "Internal Server Error"}``

Request flow:
    ASGI Server (uvicorn) → NanoServer.__call__ → Context
        → Dispatcher: errors → body → (logging) → (cors) → (auth)
        → user middleware → Router → handler
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from .config import ServerConfig
from .context import Context
from .dispatcher import Dispatcher
from .exceptions import HttpErrorMessage
from .lifespan import ServerLifespan
from .middleware import BaseMiddleware, build_middlewares
from .request import Request
from .response import Response
from .routing import Router
from .types import Receive, Scope, Send

__all__ = ["NanoServer"]

Hook = Callable[[], Any]


class NanoServer:
    """
    ASGI application owning the middleware chain.

    Attributes:
        config: Resolved ServerConfig.
        dispatcher: Dispatcher shared by all requests.
        lifespan: ServerLifespan for startup/shutdown.
        logger: Server logger instance.
        startup_hooks: Callables run on lifespan startup.
        shutdown_hooks: Callables run on lifespan shutdown.
    """

    __slots__ = (
        "config",
        "dispatcher",
        "lifespan",
        "logger",
        "startup_hooks",
        "shutdown_hooks",
        "_builtin",
    )

    def __init__(
        self,
        config: ServerConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.logger = logger or logging.getLogger("nano_asgi.server")
        self.startup_hooks: list[Hook] = []
        self.shutdown_hooks: list[Hook] = []

        self._builtin: list[BaseMiddleware] = []
        self.dispatcher = Dispatcher()
        self.configure(self.config)
        self.lifespan = ServerLifespan(self)

    def configure(self, config: ServerConfig) -> NanoServer:
        """
        Apply config and rebuild the configured middleware from it.

        Middleware and routers added with ``add()`` are kept, after the
        rebuilt ones and in their original order.
        """
        self.config = config
        toggles = dict(config.middleware)
        if config.logs:
            toggles.setdefault("logging", "on")

        user = [m for m in self.dispatcher.middlewares if not any(m is b for b in self._builtin)]
        self._builtin = build_middlewares(toggles, config.middleware_sections())
        self.dispatcher.middlewares = [*self._builtin, *user]
        return self

    def add(self, middleware: Any) -> NanoServer:
        """Append a middleware, a Router or an ``async def fn(ctx, next)``."""
        self.dispatcher.add(middleware)
        return self

    def on_startup(self, func: Hook) -> Hook:
        """Register a startup hook. Usable as a decorator."""
        self.startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register a shutdown hook. Usable as a decorator."""
        self.shutdown_hooks.append(func)
        return func

    def routes(self) -> Iterator[tuple[str, str]]:
        """Route table of every Router in the chain."""
        for middleware in self.dispatcher.middlewares:
            if isinstance(middleware, Router):
                yield from middleware.routes()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI interface."""
        scope_type = scope["type"]
        if scope_type == "lifespan":
            await self.lifespan(scope, receive, send)
        elif scope_type == "http":
            await self.handle_http(scope, receive, send)
        elif scope_type == "websocket":
            await send({"type": "websocket.close", "code": 1000})

    async def handle_http(self, scope: Scope, receive: Receive, send: Send) -> None:
        ctx = Context(request=Request(scope, receive), response=Response(send))
        try:
            await self.dispatcher(ctx)
        except Exception as exc:
            self.logger.error(
                f"Unhandled error escaped the middleware chain on "
                f"{ctx.request.method} {ctx.request.original_path}: {exc!r}",
                exc_info=exc,
            )
            if not ctx.response.has_answered():
                await ctx.response.set_status(500).json(
                    {"message": HttpErrorMessage.INTERNAL_SERVER_ERROR.value}
                )
            return

        if not ctx.response.has_answered():
            await ctx.response.set_status(404).json({"message": HttpErrorMessage.NOT_FOUND.value})

    def run(self, app: str | None = None) -> None:
        """
        Run the server using Uvicorn.

        Args:
            app: Import string (``module:attr``) of this server. Required for
                reload mode, where uvicorn re-imports the application.
        """
        import uvicorn

        host = self.config.host
        port = self.config.port
        self.logger.info(f"Starting server on {host}:{port}")
        if self.config.reload:
            if app is None:
                raise RuntimeError("Reload mode needs the application import string")
            uvicorn.run(app, host=host, port=port, reload=True)
        else:
            uvicorn.run(self, host=host, port=port)

    def __repr__(self) -> str:
        return f"NanoServer(middlewares={len(self.dispatcher)})"
