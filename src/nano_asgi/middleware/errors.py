# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Exception-translation middleware.

Wraps the rest of the chain and turns raised failures into responses.

Exception handling:
    - HTTPException with 4xx status: that status, body
      ``{"status": <code>, "message": <message>}``, plus any headers the
      exception carries.
    - Anything else (unclassified, or classified 5xx): 500 with body
      ``{"status": 500, "message": "Internal Server Error"}``. The original
      error is logged with its traceback and never sent to the client.

Nothing is written if a downstream middleware already answered.

Note:
    Always enabled (middleware_default=True) and first in the chain
    (middleware_order=100) so it sees every failure.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import BaseMiddleware
from ..exceptions import HTTPException, HttpErrorMessage

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next


class ExceptionHandler(BaseMiddleware):
    """Converts exceptions raised downstream into HTTP responses.

    Attributes:
        logger: Operator-facing sink for undisclosed errors.

    Class Attributes:
        middleware_name: "errors" - identifier for config.
        middleware_order: 100 - runs first to catch all errors.
        middleware_default: True - enabled by default.
    """

    middleware_name = "errors"
    middleware_order = 100
    middleware_default = True

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("nano_asgi.errors")

    async def handle(self, ctx: Context, next: Next) -> None:
        """Run the rest of the chain, translating any failure."""
        try:
            await next()
        except HTTPException as exc:
            if exc.is_client_error:
                await self._send_client_error(ctx, exc)
            else:
                await self._send_server_error(ctx, exc)
        except Exception as exc:
            await self._send_server_error(ctx, exc)

    async def _send_client_error(self, ctx: Context, exc: HTTPException) -> None:
        """Answer with the classified status and message."""
        if ctx.response.has_answered():
            self.logger.warning(
                f"{exc.status_code} {exc.message} raised after response was sent "
                f"({ctx.request.method} {ctx.request.original_path})"
            )
            return

        for name, value in exc.headers or ():
            ctx.response.set_header(name, value)
        await ctx.response.set_status(exc.status_code).json(
            {"status": exc.status_code, "message": exc.message}
        )

    async def _send_server_error(self, ctx: Context, error: Exception) -> None:
        """Log the real error and answer with a generic 500."""
        self.logger.error(
            f"Unhandled error on {ctx.request.method} {ctx.request.original_path}: {error!r}",
            exc_info=error,
        )
        if ctx.response.has_answered():
            return
        await ctx.response.set_status(500).json(
            {"status": 500, "message": HttpErrorMessage.INTERNAL_SERVER_ERROR.value}
        )
