# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""CORS (Cross-Origin Resource Sharing) middleware.

Adds CORS headers to responses so browsers accept cross-origin requests,
and answers preflight OPTIONS requests without reaching the router.

Config:
    origins (list|str): Origins allowed. Default: ["*"]
    methods (list|str): HTTP methods allowed. Default: common methods
    headers (list|str): Request headers allowed. Default: ["*"]
    credentials (bool): Allow credentials (cookies). Default: False
    expose (list|str): Response headers to expose. Default: []
    maxage (int): Preflight cache time in seconds. Default: 600

Note:
    When credentials are allowed, "*" cannot be sent as origin - the
    request origin is echoed back instead.

Example:
    Enable in config.toml::

        [middleware]
        cors = "on"

        [cors]
        origins = ["https://example.com", "https://app.example.com"]
        credentials = true
        maxage = 3600
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware
from ..utils import split_and_strip

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next

DEFAULT_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH", "HEAD"]


class CORSMiddleware(BaseMiddleware):
    """Preflight answers and CORS response headers.

    Attributes:
        allow_origins: List of allowed origins.
        allow_methods: List of allowed HTTP methods.
        allow_headers: List of allowed request headers.
        allow_credentials: Whether to allow credentials.
        expose_headers: List of headers to expose to browser.
        max_age: Preflight response cache time in seconds.

    Class Attributes:
        middleware_name: "cors" - identifier for config.
        middleware_order: 300 - after logging, before auth.
        middleware_default: False - disabled by default.
    """

    middleware_name = "cors"
    middleware_order = 300
    middleware_default = False

    def __init__(
        self,
        allow_origins: str | list[str] | None = None,
        allow_methods: str | list[str] | None = None,
        allow_headers: str | list[str] | None = None,
        allow_credentials: bool = False,
        expose_headers: str | list[str] | None = None,
        max_age: int = 600,
    ) -> None:
        self.allow_origins = split_and_strip(allow_origins, ["*"])
        self.allow_methods = split_and_strip(allow_methods, DEFAULT_METHODS)
        self.allow_headers = split_and_strip(allow_headers, ["*"])
        self.allow_credentials = allow_credentials
        self.expose_headers = split_and_strip(expose_headers)
        self.max_age = max_age

        self._allow_all_origins = "*" in self.allow_origins
        self._preflight_headers = self._build_preflight_headers()

    @classmethod
    def from_config(cls, options: Mapping[str, Any]) -> CORSMiddleware:
        return cls(
            allow_origins=options.get("origins"),
            allow_methods=options.get("methods"),
            allow_headers=options.get("headers"),
            allow_credentials=bool(options.get("credentials", False)),
            expose_headers=options.get("expose"),
            max_age=int(options.get("maxage", 600)),
        )

    def _build_preflight_headers(self) -> list[tuple[str, str]]:
        """Static headers of every successful preflight answer."""
        headers = [
            ("access-control-allow-methods", ", ".join(self.allow_methods)),
            ("access-control-max-age", str(self.max_age)),
        ]
        if self.allow_headers:
            if "*" in self.allow_headers:
                headers.append(("access-control-allow-headers", "*"))
            else:
                headers.append(("access-control-allow-headers", ", ".join(self.allow_headers)))
        return headers

    def cors_headers(self, origin: str | None) -> list[tuple[str, str]]:
        """CORS headers for a request from ``origin``.

        Returns:
            Headers to add, empty if origin is missing or not allowed.
        """
        if not origin:
            return []

        headers: list[tuple[str, str]] = []
        if self._allow_all_origins:
            if self.allow_credentials:
                headers.append(("access-control-allow-origin", origin))
            else:
                headers.append(("access-control-allow-origin", "*"))
        elif origin in self.allow_origins:
            headers.append(("access-control-allow-origin", origin))
            headers.append(("vary", "Origin"))
        else:
            return []

        if self.allow_credentials:
            headers.append(("access-control-allow-credentials", "true"))
        if self.expose_headers:
            headers.append(("access-control-expose-headers", ", ".join(self.expose_headers)))
        return headers

    async def handle(self, ctx: Context, next: Next) -> None:
        origin = ctx.request.get_header("origin")

        if ctx.request.method == "OPTIONS" and origin:
            await self._preflight(ctx, origin)
            return

        for name, value in self.cors_headers(origin):
            ctx.response.set_header(name, value)
        await next()

    async def _preflight(self, ctx: Context, origin: str) -> None:
        """Answer a preflight: 200 with CORS headers, 400 for unknown origins."""
        headers = self.cors_headers(origin)
        if not headers:
            await ctx.response.set_status(400).empty()
            return

        for name, value in headers + self._preflight_headers:
            ctx.response.set_header(name, value)
        await ctx.response.set_status(200).empty()
