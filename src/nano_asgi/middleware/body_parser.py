# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""JSON body parser middleware.

Fills ``ctx.request.body`` before handlers run.

Parsing happens only when both hold:
    - method is POST, PUT, PATCH or DELETE
    - the ``content-type`` header contains ``application/json``

Otherwise the body stays ``{}`` and the stream is left unread.

An empty or whitespace-only body parses to ``{}``. Malformed JSON (or
bytes that are not UTF-8) raises ``BodyParseError``, a 400.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from . import BaseMiddleware
from ..exceptions import BodyParseError

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next

BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class BodyParser(BaseMiddleware):
    """Decodes JSON request bodies into ``ctx.request.body``.

    Class Attributes:
        middleware_name: "body" - identifier for config.
        middleware_order: 150 - right after the exception handler.
        middleware_default: True - enabled by default.
    """

    middleware_name = "body"
    middleware_order = 150
    middleware_default = True

    async def handle(self, ctx: Context, next: Next) -> None:
        request = ctx.request

        if request.method in BODY_METHODS:
            content_type = request.get_header("content-type") or ""
            if "application/json" in content_type.lower():
                request.body = await self._parse_json(ctx)

        await next()

    async def _parse_json(self, ctx: Context) -> Any:
        try:
            text = await ctx.request.read_body_as_string()
        except UnicodeDecodeError as exc:
            raise BodyParseError(details={"reason": str(exc)}) from exc

        if not text.strip():
            return {}

        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as exc:
            raise BodyParseError(details={"reason": str(exc)}) from exc
