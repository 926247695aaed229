# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for CORSMiddleware."""

from __future__ import annotations

import pytest

from conftest import make_ctx, noop_next
from nano_asgi.middleware.cors import CORSMiddleware

ORIGIN = "https://app.example.com"


def origin_headers(origin: str = ORIGIN) -> list[tuple[bytes, bytes]]:
    return [(b"origin", origin.encode())]


class TestPreflight:
    """Tests for OPTIONS requests carrying an Origin."""

    @pytest.mark.asyncio
    async def test_allowed_origin(self) -> None:
        """Preflight from an allowed origin is answered 200 with no body."""
        cors = CORSMiddleware(allow_origins=[ORIGIN], allow_methods="GET, POST")
        ctx, send = make_ctx("OPTIONS", "/users", headers=origin_headers())
        called: list[bool] = []

        async def next() -> None:
            called.append(True)

        await cors.handle(ctx, next)

        assert called == []
        assert send.status == 200
        assert send.body == b""
        assert send.headers[b"access-control-allow-origin"] == ORIGIN.encode()
        assert send.headers[b"access-control-allow-methods"] == b"GET, POST"
        assert send.headers[b"access-control-max-age"] == b"600"

    @pytest.mark.asyncio
    async def test_disallowed_origin(self) -> None:
        """Preflight from an unknown origin gets 400."""
        cors = CORSMiddleware(allow_origins=[ORIGIN])
        ctx, send = make_ctx("OPTIONS", headers=origin_headers("https://evil.example"))
        await cors.handle(ctx, noop_next)

        assert send.status == 400
        assert b"access-control-allow-origin" not in send.headers

    @pytest.mark.asyncio
    async def test_options_without_origin_passes(self) -> None:
        """OPTIONS without Origin is not a preflight."""
        cors = CORSMiddleware()
        ctx, send = make_ctx("OPTIONS")
        called: list[bool] = []

        async def next() -> None:
            called.append(True)

        await cors.handle(ctx, next)
        assert called == [True]
        assert send.messages == []


class TestSimpleRequests:
    """Tests for headers on non-preflight requests."""

    @pytest.mark.asyncio
    async def test_wildcard_origin(self) -> None:
        """Default config allows any origin with '*'."""
        ctx, send = make_ctx(headers=origin_headers())

        async def answer() -> None:
            await ctx.response.json({})

        await CORSMiddleware().handle(ctx, answer)
        assert send.headers[b"access-control-allow-origin"] == b"*"

    @pytest.mark.asyncio
    async def test_credentials_echo_origin(self) -> None:
        """With credentials the origin is echoed, never '*'."""
        ctx, send = make_ctx(headers=origin_headers())

        async def answer() -> None:
            await ctx.response.json({})

        await CORSMiddleware(allow_credentials=True).handle(ctx, answer)
        assert send.headers[b"access-control-allow-origin"] == ORIGIN.encode()
        assert send.headers[b"access-control-allow-credentials"] == b"true"

    @pytest.mark.asyncio
    async def test_listed_origin_varies(self) -> None:
        """Specific origins add Vary: Origin."""
        ctx, send = make_ctx(headers=origin_headers())

        async def answer() -> None:
            await ctx.response.json({})

        await CORSMiddleware(allow_origins=ORIGIN, expose_headers=["x-total"]).handle(ctx, answer)
        assert send.headers[b"vary"] == b"Origin"
        assert send.headers[b"access-control-expose-headers"] == b"x-total"

    @pytest.mark.asyncio
    async def test_no_origin_no_headers(self) -> None:
        """Same-origin requests get no CORS headers."""
        ctx, send = make_ctx()

        async def answer() -> None:
            await ctx.response.json({})

        await CORSMiddleware().handle(ctx, answer)
        assert b"access-control-allow-origin" not in send.headers

    def test_from_config(self) -> None:
        """Config keys map to constructor arguments."""
        cors = CORSMiddleware.from_config(
            {"origins": "https://a.com, https://b.com", "credentials": True, "maxage": 60}
        )
        assert cors.allow_origins == ["https://a.com", "https://b.com"]
        assert cors.allow_credentials is True
        assert cors.max_age == 60
