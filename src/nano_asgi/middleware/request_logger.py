# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Request Logger - HTTP access logging.

Logs incoming requests and their outcome with timing information.
Uses Python's standard logging module for output.

Log format:
    Request:  "<- GET /api/users from 192.168.1.1"
    Response: "-> GET /api/users 200 (12.5ms)"
    Error:    "-> GET /api/users ERROR: ... (12.5ms)"

Config:
    logger (str): Logger name. Default: "nano_asgi.access".
    level (str): Log level (DEBUG, INFO, WARNING, ERROR). Default: "INFO".
    query (bool): Include query string in request log. Default: True.
    headers (bool): Log request headers at DEBUG level. Default: False.

Example:
    Enable in config.toml::

        [server]
        logs = true

        [logging]
        level = "DEBUG"
        headers = true
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next


class RequestLogger(BaseMiddleware):
    """Access logging middleware.

    Attributes:
        logger: Logger instance for access logs.
        level: Numeric log level (from logging module).
        include_query: Whether to include query string in request path.
        include_headers: Whether to log request headers (at DEBUG level).

    Class Attributes:
        middleware_name: "logging" - identifier for config.
        middleware_order: 200 - after body parsing, before user middleware.
        middleware_default: False - enabled by ``[server] logs``.
    """

    middleware_name = "logging"
    middleware_order = 200
    middleware_default = False

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: str = "INFO",
        include_query: bool = True,
        include_headers: bool = False,
    ) -> None:
        self.logger = logger or logging.getLogger("nano_asgi.access")
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.include_query = include_query
        self.include_headers = include_headers

    @classmethod
    def from_config(cls, options: Mapping[str, Any]) -> RequestLogger:
        name = options.get("logger")
        return cls(
            logger=logging.getLogger(name) if name else None,
            level=options.get("level", "INFO"),
            include_query=options.get("query", True),
            include_headers=options.get("headers", False),
        )

    async def handle(self, ctx: Context, next: Next) -> None:
        request = ctx.request
        start_time = time.perf_counter()

        request_info = f"{request.method} {request.original_path}"
        query = request.scope.get("query_string", b"").decode("latin-1")
        if self.include_query and query:
            request_info += f"?{query}"

        self.logger.log(self.level, f"<- {request_info} from {request.client or 'unknown'}")
        if self.include_headers:
            self.logger.debug(f"   Headers: {dict(request.headers.items())}")

        try:
            await next()
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            self.logger.error(f"-> {request_info} ERROR: {e} ({duration:.1f}ms)")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        status = ctx.response.status if ctx.response.has_answered() else "-"
        self.logger.log(self.level, f"-> {request_info} {status} ({duration:.1f}ms)")
