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
Router - method + path dispatch with nested composition.

Purpose
=======
A Router is a middleware that selects the handler for ``(method, path)``
and calls it with the request Context. It is normally the last entry of the
chain: it never calls ``next``.

Definition::

    class Router(BaseMiddleware):
        def __init__(self, base_path: str = "", logger: Logger | None = None)
        def add_route(self, method: str, path: str, handler: RouteHandler) -> None
        def get/post/put/patch/delete(self, path, handler) -> None
        def route(self, path, methods=("GET",)) -> decorator
        def compose(self, router: Router) -> Router
        def match(self, method, path) -> RouteMatch | Router | None
        async def handle(self, ctx, next) -> None
        def routes(self) -> Iterator[tuple[str, str]]

Example::

    api = Router("/api")
    users = Router("/users")

    @users.route("/:id")
    async def get_user(ctx):
        await ctx.response.json({"id": ctx.request.params["id"]})

    api.compose(users)          # GET /api/users/7 -> get_user, params {"id": "7"}

Paths
=====
Route and base paths are normalized: ``""`` and ``"/"`` become ``""``,
others get a leading ``/`` and lose one trailing ``/``. A route is stored
under ``base_path + path``. Paths without ``:name`` segments go in an O(1)
static map; the others compile to anchored regexes where each ``:name``
matches exactly one segment.

Matching
========
1. ``"/"`` is looked up as ``""``.
2. Static map of the method.
3. Dynamic routes of the method, in registration order.
4. Composed routers, in composition order: the first one whose full prefix
   (``self.base_path + child.base_path``) covers the path gets the request.
   Before delegating, ``self.base_path`` is stripped from
   ``ctx.request.path`` (``"/"`` if nothing is left).
5. Otherwise ``NotFound`` with the method and the original request path.

First match wins at every level; a delegated request never comes back to
try later siblings. Compose more specific routers before broader ones
sharing a prefix.

Prefix coverage is segment-aware: ``/user`` does not cover ``/users``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING

from ..exceptions import NotFound
from ..middleware import BaseMiddleware
from ..request import HttpMethod
from ..utils import invoke
from .route import MethodRoutes, RouteEntry, RouteMatch, compile_path, is_dynamic, normalize_path

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next, RouteHandler

__all__ = ["Router"]


class Router(BaseMiddleware):
    """
    Route table plus composed child routers.

    Attributes:
        base_path: Normalized prefix of every route and child of this router.
        logger: Registration and delegation diagnostics.
    """

    def __init__(self, base_path: str = "", logger: logging.Logger | None = None) -> None:
        self.base_path = normalize_path(base_path)
        self.logger = logger or logging.getLogger("nano_asgi.router")
        self._routes: dict[str, MethodRoutes] = {}
        self._routers: list[Router] = []

    # Registration

    def add_route(self, method: str, path: str, handler: RouteHandler) -> None:
        """Register handler for method on ``base_path + path``."""
        method = method.upper()
        normalized = normalize_path(path)
        full_path = self.base_path + normalized
        routes = self._routes.setdefault(method, MethodRoutes())

        if is_dynamic(normalized):
            pattern, param_names = compile_path(full_path)
            routes.dynamic.append(RouteEntry(full_path, pattern, param_names, handler))
        else:
            routes.static[full_path] = handler
        self.logger.debug(f"Registered {method} {full_path or '/'}")

    def get(self, path: str, handler: RouteHandler) -> None:
        self.add_route(HttpMethod.GET, path, handler)

    def post(self, path: str, handler: RouteHandler) -> None:
        self.add_route(HttpMethod.POST, path, handler)

    def put(self, path: str, handler: RouteHandler) -> None:
        self.add_route(HttpMethod.PUT, path, handler)

    def patch(self, path: str, handler: RouteHandler) -> None:
        self.add_route(HttpMethod.PATCH, path, handler)

    def delete(self, path: str, handler: RouteHandler) -> None:
        self.add_route(HttpMethod.DELETE, path, handler)

    def route(
        self, path: str, methods: Iterable[str] = (HttpMethod.GET,)
    ) -> Callable[[RouteHandler], RouteHandler]:
        """Decorator form of ``add_route`` for one or more methods."""

        def decorator(handler: RouteHandler) -> RouteHandler:
            for method in methods:
                self.add_route(method, path, handler)
            return handler

        return decorator

    def compose(self, router: Router) -> Router:
        """Attach a child router. Returns self for chaining."""
        self._routers.append(router)
        return self

    # Dispatch

    def match(self, method: str, path: str) -> RouteMatch | Router | None:
        """Handler and params, or the child router to delegate to, or None."""
        if path == "/":
            path = ""

        routes = self._routes.get(method)
        if routes is not None:
            handler = routes.static.get(path)
            if handler is not None:
                return RouteMatch(handler)
            for entry in routes.dynamic:
                params = entry.match(path)
                if params is not None:
                    return RouteMatch(entry.handler, params)

        for router in self._routers:
            prefix = self.base_path + router.base_path
            if not prefix or path == prefix or path.startswith(prefix + "/"):
                return router
        return None

    async def handle(self, ctx: Context, next: Next) -> None:
        request = ctx.request
        found = self.match(request.method, request.path)

        if found is None:
            raise NotFound(
                f"Route not found {request.method} {request.original_path}",
                details={"method": request.method, "path": request.original_path},
            )

        if isinstance(found, Router):
            remaining = request.path[len(self.base_path):]
            request.path = remaining or "/"
            await found.handle(ctx, next)
            return

        request.params = found.params
        await invoke(found.handler, ctx)

    # Diagnostics

    def routes(self, prefix: str = "") -> Iterator[tuple[str, str]]:
        """Yield ``(method, path)`` for this router and, depth-first, its children."""
        for method, routes in self._routes.items():
            for path in routes.static:
                yield method, prefix + path or "/"
            for entry in routes.dynamic:
                yield method, prefix + entry.path or "/"
        for router in self._routers:
            yield from router.routes(prefix + self.base_path)

    def __repr__(self) -> str:
        return f"Router(base_path={self.base_path!r}, children={len(self._routers)})"
