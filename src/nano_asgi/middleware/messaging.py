# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Exposes a ``MessagingService`` to handlers as ``ctx.payload.messaging``.

Not registered for configuration: it needs a live service instance, so it
is added explicitly with ``server.add(MessagingMiddleware(service))``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import BaseMiddleware

if TYPE_CHECKING:
    from ..context import Context
    from ..messaging import MessagingService
    from ..types import Next


class MessagingMiddleware(BaseMiddleware):
    """Injects the shared messaging service into every request payload."""

    def __init__(self, service: MessagingService) -> None:
        self.service = service

    async def handle(self, ctx: Context, next: Next) -> None:
        ctx.payload.messaging = self.service
        await next()
