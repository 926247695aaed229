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
HTTP request wrapper over an ASGI ``scope`` and ``receive`` pair.

Fields
======
- ``method``: upper-case HTTP method
- ``path``: routing path. Mutable: a Router strips its base path from it
  before delegating to a composed child Router.
- ``original_path``: the path as received. Never modified, used for
  diagnostics and access logs.
- ``params``: dynamic path segments bound by the Router (``{"id": "42"}``)
- ``query``: ``QueryParams`` parsed from the query string
- ``body``: parsed body. ``{}`` until a body parser fills it.
- ``headers``: ``Headers``, lower-case names

Body reading
============
``await request.read_body_as_string()`` drains ``http.request`` messages until
``more_body`` is false and returns the text. The bytes are cached, so a second
call does not touch ``receive`` again. A ``http.disconnect`` before the end of
the body raises ``ClientDisconnect``.

Example::

    request = Request(scope, receive)
    request.get_header("Content-Type")   # "application/json"
    text = await request.read_body_as_string()
"""

from __future__ import annotations

from typing import Any

from .datastructures import Headers, QueryParams, headers_from_scope, query_params_from_scope
from .exceptions import ClientDisconnect
from .types import Receive, Scope

__all__ = ["Request", "HttpMethod"]


class HttpMethod:
    """HTTP method names understood by the Router."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"


class Request:
    """HTTP request adapter wrapping an ASGI scope."""

    __slots__ = (
        "_scope",
        "_receive",
        "_body_bytes",
        "method",
        "path",
        "original_path",
        "params",
        "query",
        "body",
        "headers",
    )

    def __init__(self, scope: Scope, receive: Receive) -> None:
        self._scope = scope
        self._receive = receive
        self._body_bytes: bytes | None = None

        self.method: str = scope.get("method", "GET").upper()
        path = scope.get("path") or "/"
        self.original_path: str = path
        self.path: str = path
        self.params: dict[str, str] = {}
        self.query: QueryParams = query_params_from_scope(scope)
        self.body: Any = {}
        self.headers: Headers = headers_from_scope(scope)

    @property
    def scope(self) -> Scope:
        """The raw ASGI scope."""
        return self._scope

    @property
    def client(self) -> str | None:
        """Client host, if the server reported one."""
        client = self._scope.get("client")
        return client[0] if client else None

    def get_header(self, name: str) -> str | None:
        """First value of a header (case-insensitive), or None."""
        return self.headers.get(name)

    def get_header_list(self, name: str) -> list[str]:
        """All values of a header (case-insensitive)."""
        return self.headers.getlist(name)

    def set_header(self, name: str, value: str | list[str]) -> None:
        """Replace a header's values."""
        self.headers.set(name, value)

    def append_header(self, name: str, value: str | list[str]) -> None:
        """Add value(s) to a header, keeping existing ones."""
        self.headers.append(name, value)

    async def read_body(self) -> bytes:
        """
        Drain the request body to end-of-stream.

        Returns:
            The complete body bytes.

        Raises:
            ClientDisconnect: The client disconnected before the body ended.
        """
        if self._body_bytes is not None:
            return self._body_bytes

        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            msg_type = message.get("type")
            if msg_type == "http.disconnect":
                raise ClientDisconnect("Client disconnected while reading request body")
            if msg_type != "http.request":
                continue
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                break

        self._body_bytes = b"".join(chunks)
        return self._body_bytes

    async def read_body_as_string(self, encoding: str = "utf-8") -> str:
        """Drain the body and decode it as text."""
        body = await self.read_body()
        return body.decode(encoding)

    def __repr__(self) -> str:
        return f"<Request method={self.method} path={self.original_path!r}>"
