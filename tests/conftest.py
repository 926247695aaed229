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

"""Shared ASGI test doubles."""

from __future__ import annotations

from typing import Any

import orjson
import pytest

from nano_asgi.context import Context
from nano_asgi.request import Request
from nano_asgi.response import Response


class MockSend:
    """Capture ASGI send messages for testing."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def start_message(self) -> dict[str, Any]:
        """Get the http.response.start message."""
        return self.messages[0]

    @property
    def body_messages(self) -> list[dict[str, Any]]:
        """Get all http.response.body messages."""
        return [m for m in self.messages if m["type"] == "http.response.body"]

    @property
    def status(self) -> int:
        """Get response status code."""
        return self.start_message["status"]

    @property
    def headers(self) -> dict[bytes, bytes]:
        """Get headers as dict."""
        return dict(self.start_message["headers"])

    @property
    def body(self) -> bytes:
        """Get complete body (concatenated from all body messages)."""
        return b"".join(m.get("body", b"") for m in self.body_messages)

    def json(self) -> Any:
        return orjson.loads(self.body)


def make_scope(
    method: str = "GET",
    path: str = "/",
    headers: list[tuple[bytes, bytes]] | None = None,
    query_string: bytes = b"",
) -> dict[str, Any]:
    """Create a minimal HTTP scope."""
    return {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query_string,
        "headers": headers or [],
        "client": ("127.0.0.1", 50000),
    }


def make_receive(*chunks: bytes, disconnect: bool = False) -> Any:
    """Receive callable yielding body chunks, then optionally a disconnect."""
    messages: list[dict[str, Any]] = []
    for i, chunk in enumerate(chunks):
        more = i < len(chunks) - 1 or disconnect
        messages.append({"type": "http.request", "body": chunk, "more_body": more})
    if not chunks and not disconnect:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    if disconnect:
        messages.append({"type": "http.disconnect"})

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


def make_ctx(
    method: str = "GET",
    path: str = "/",
    headers: list[tuple[bytes, bytes]] | None = None,
    body: bytes | None = None,
    query_string: bytes = b"",
) -> tuple[Context, MockSend]:
    """Build a Context over mock transport. Returns (ctx, send)."""
    send = MockSend()
    receive = make_receive(body) if body is not None else make_receive()
    scope = make_scope(method, path, headers, query_string)
    return Context(request=Request(scope, receive), response=Response(send)), send


async def noop_next() -> None:
    """Continuation that does nothing."""


@pytest.fixture
def send() -> MockSend:
    """Create a mock send callable."""
    return MockSend()
