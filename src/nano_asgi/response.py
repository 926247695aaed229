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

"""
HTTP response writer over an ASGI ``send`` callable.

Unlike a value object built and returned by the handler, a nano-asgi
``Response`` is created by the server for each request and written to by
whoever answers it (a handler, the exception handler, the server fallback).

Lifecycle
=========
::

    response = Response(send)          # status 200, not answered
    response.set_status(201)           # fluent, returns response
    response.set_header("x-id", "7")   # pending header
    await response.json({"id": 7})     # terminal write: start + body
    response.has_answered()            # True, and stays True

Terminal writes
===============
``text()``, ``json()`` and ``send_bytes()`` are terminal: they emit
``http.response.start`` with the current status and pending headers, then a
single ``http.response.body``. The response does not reject a second terminal
write itself; callers that may race with a handler (exception handler,
server fallback) must check ``has_answered()`` first.

JSON is encoded with orjson.
"""

from __future__ import annotations

from typing import Any

import orjson

from .types import Send

__all__ = ["Response"]


class Response:
    """
    Pending HTTP response bound to one ASGI ``send``.

    Attributes:
        status: Status code used by the next terminal write (default 200).
        body: Bytes sent by the terminal write, b"" before it.
    """

    __slots__ = ("_send", "_headers", "_answered", "status", "body")

    charset: str = "utf-8"

    def __init__(self, send: Send) -> None:
        self._send = send
        self._headers: list[tuple[str, str]] = []
        self._answered = False
        self.status: int = 200
        self.body: bytes = b""

    def set_status(self, status_code: int) -> Response:
        """Set the pending status code. Returns self for chaining."""
        self.status = status_code
        return self

    def set_header(self, name: str, value: str) -> Response:
        """Add a response header. No effect once the response is answered."""
        if not self._answered:
            self._headers.append((name.lower(), value))
        return self

    @property
    def headers(self) -> list[tuple[str, str]]:
        """Pending (or sent) headers as lower-case (name, value) tuples."""
        return list(self._headers)

    def has_answered(self) -> bool:
        """True once a terminal write has started."""
        return self._answered

    async def text(self, data: str) -> None:
        """Terminal write of a plain-text body."""
        await self.send_bytes(data.encode(self.charset), f"text/plain; charset={self.charset}")

    async def json(self, data: Any) -> None:
        """Terminal write of a JSON body."""
        await self.send_bytes(orjson.dumps(data), "application/json")

    async def empty(self) -> None:
        """Terminal write with no body (preflight answers, 204)."""
        await self.send_bytes(b"", None)

    async def send_bytes(self, body: bytes, media_type: str | None) -> None:
        """
        Terminal write of raw bytes with the given content type.

        Args:
            body: Encoded response body.
            media_type: Value for the content-type header, None to omit it.
        """
        self._answered = True
        self.body = body
        headers = [
            (name, value)
            for name, value in self._headers
            if name not in ("content-type", "content-length")
        ]
        if media_type is not None:
            headers.append(("content-type", media_type))
        headers.append(("content-length", str(len(body))))
        self._headers = headers

        await self._send(
            {
                "type": "http.response.start",
                "status": self.status,
                "headers": [
                    (name.encode("latin-1"), value.encode("latin-1"))
                    for name, value in headers
                ],
            }
        )
        await self._send({"type": "http.response.body", "body": body})

    def __repr__(self) -> str:
        return f"<Response status={self.status} answered={self._answered}>"
