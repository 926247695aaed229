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

"""Tests for Router matching, composition and dispatch."""

from __future__ import annotations

from typing import Any

import pytest

from conftest import make_ctx, noop_next
from nano_asgi.context import Context
from nano_asgi.exceptions import NotFound
from nano_asgi.routing import Router, compile_path, normalize_path


class Recorder:
    """Handler double recording the contexts it was called with."""

    def __init__(self) -> None:
        self.calls: list[Context] = []

    def __call__(self, ctx: Context) -> None:
        self.calls.append(ctx)

    @property
    def called(self) -> bool:
        return bool(self.calls)


async def dispatch(router: Router, method: str, path: str) -> Context:
    ctx, _ = make_ctx(method, path)
    await router.handle(ctx, noop_next)
    return ctx


class TestNormalizePath:
    """Tests for path normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", ""),
            ("/", ""),
            ("api", "/api"),
            ("/api", "/api"),
            ("api/", "/api"),
            ("/api/", "/api"),
            ("/api/v1", "/api/v1"),
        ],
    )
    def test_cases(self, raw: str, expected: str) -> None:
        """Leading slash added, one trailing slash removed."""
        assert normalize_path(raw) == expected

    @pytest.mark.parametrize("raw", ["", "/", "a", "/a/", "a/b/", "/a/:id"])
    def test_idempotent(self, raw: str) -> None:
        """Normalizing twice changes nothing."""
        once = normalize_path(raw)
        assert normalize_path(once) == once

    def test_base_path_normalized(self) -> None:
        """Router base_path is always normalized."""
        assert Router("api/").base_path == "/api"
        assert Router("/").base_path == ""


class TestCompilePath:
    """Tests for dynamic path compilation."""

    def test_param_names_in_order(self) -> None:
        """Names are recorded left to right."""
        _, names = compile_path("/users/:a/posts/:b")
        assert names == ["a", "b"]

    def test_param_matches_one_segment(self) -> None:
        """A parameter never spans a slash or matches empty."""
        pattern, _ = compile_path("/users/:id")
        assert pattern.match("/users/42")
        assert not pattern.match("/users/42/extra")
        assert not pattern.match("/users/")

    def test_literal_segments_escaped(self) -> None:
        """Regex metacharacters in literals match themselves only."""
        pattern, _ = compile_path("/files/v1.0/:name")
        assert pattern.match("/files/v1.0/a")
        assert not pattern.match("/files/v1x0/a")


class TestStaticRoutes:
    """Tests for exact-path routes."""

    @pytest.mark.asyncio
    async def test_get(self) -> None:
        """Registered handler is called with the context."""
        router = Router()
        handler = Recorder()
        router.get("/users", handler)

        ctx = await dispatch(router, "GET", "/users")
        assert handler.calls == [ctx]
        assert ctx.request.params == {}

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        """Unregistered path raises NotFound."""
        router = Router()
        with pytest.raises(NotFound):
            await dispatch(router, "GET", "/non-existent-route")

    @pytest.mark.asyncio
    async def test_root_path(self) -> None:
        """'/' registered and requested matches."""
        router = Router()
        handler = Recorder()
        router.get("/", handler)
        await dispatch(router, "GET", "/")
        assert handler.called

    @pytest.mark.asyncio
    async def test_trailing_slash_in_registration(self) -> None:
        """Registration with trailing slash matches the bare path."""
        router = Router()
        handler = Recorder()
        router.get("/users/", handler)
        await dispatch(router, "GET", "/users")
        assert handler.called

    @pytest.mark.asyncio
    async def test_base_path_prefix(self) -> None:
        """Routes are keyed by base_path + path."""
        router = Router("/api")
        handler = Recorder()
        router.get("/health", handler)
        await dispatch(router, "GET", "/api/health")
        assert handler.called
        with pytest.raises(NotFound):
            await dispatch(router, "GET", "/health")

    @pytest.mark.asyncio
    async def test_async_handler(self) -> None:
        """Coroutine handlers are awaited."""
        router = Router()

        async def ping(ctx: Context) -> None:
            await ctx.response.json({"pong": True})

        router.get("/ping", ping)
        ctx, send = make_ctx("GET", "/ping")
        await router.handle(ctx, noop_next)
        assert send.json() == {"pong": True}


class TestDynamicRoutes:
    """Tests for ':name' routes."""

    @pytest.mark.asyncio
    async def test_single_param(self) -> None:
        """One parameter is extracted."""
        router = Router()
        handler = Recorder()
        router.get("/users/:id", handler)

        ctx = await dispatch(router, "GET", "/users/123")
        assert handler.called
        assert ctx.request.params == {"id": "123"}

    @pytest.mark.asyncio
    async def test_multiple_params(self) -> None:
        """Parameters bind positionally."""
        router = Router()
        router.get("/users/:a/posts/:b", Recorder())

        ctx = await dispatch(router, "GET", "/users/1/posts/2")
        assert ctx.request.params == {"a": "1", "b": "2"}

    @pytest.mark.asyncio
    async def test_static_wins_over_dynamic(self) -> None:
        """Exact static match is tried before dynamic routes."""
        router = Router()
        me, by_id = Recorder(), Recorder()
        router.get("/users/:id", by_id)
        router.get("/users/me", me)

        await dispatch(router, "GET", "/users/me")
        assert me.called
        assert not by_id.called

    @pytest.mark.asyncio
    async def test_first_registered_dynamic_wins(self) -> None:
        """Overlapping dynamic routes resolve by registration order."""
        router = Router()
        first, second = Recorder(), Recorder()
        router.get("/:kind/:id", first)
        router.get("/users/:id", second)

        ctx = await dispatch(router, "GET", "/users/5")
        assert first.called
        assert not second.called
        assert ctx.request.params == {"kind": "users", "id": "5"}


class TestComposition:
    """Tests for nested routers."""

    @pytest.mark.asyncio
    async def test_nested_router(self) -> None:
        """Parent without base path delegates by child prefix."""
        main = Router()
        users = Router("/users")
        handler = Recorder()
        users.get("/:id", handler)
        main.compose(users)

        ctx = await dispatch(main, "GET", "/users/123")
        assert handler.calls == [ctx]
        assert ctx.request.params == {"id": "123"}

    @pytest.mark.asyncio
    async def test_deeply_nested(self) -> None:
        """/api -> /v1 -> /users routes /api/v1/users/9."""
        api, v1, users = Router("/api"), Router("/v1"), Router("/users")
        handler = Recorder()
        users.get("/:id", handler)
        v1.compose(users)
        api.compose(v1)

        ctx = await dispatch(api, "GET", "/api/v1/users/9")
        assert handler.called
        assert ctx.request.params == {"id": "9"}
        assert ctx.request.path == "/users/9"
        assert ctx.request.original_path == "/api/v1/users/9"

    @pytest.mark.asyncio
    async def test_siblings_are_independent(self) -> None:
        """Each request goes to the child owning its prefix."""
        main = Router()
        users, posts = Router("/users"), Router("/posts")
        user_handler, post_handler = Recorder(), Recorder()
        users.get("/:id", user_handler)
        posts.get("/:id", post_handler)
        main.compose(users).compose(posts)

        await dispatch(main, "GET", "/users/123")
        await dispatch(main, "GET", "/posts/456")
        assert len(user_handler.calls) == 1
        assert len(post_handler.calls) == 1

    @pytest.mark.asyncio
    async def test_child_root_route(self) -> None:
        """Path equal to the child prefix reaches the child's '/' route."""
        api, status = Router("/api"), Router("/status")
        handler = Recorder()
        status.get("/", handler)
        api.compose(status)

        await dispatch(api, "GET", "/api/status")
        assert handler.called

    @pytest.mark.asyncio
    async def test_prefix_is_segment_aware(self) -> None:
        """'/user' does not capture '/users/...'.

        Delegation needs the path to equal the child prefix or continue it
        with '/'; a bare string-prefix match is not enough.
        """
        main = Router()
        user, users = Router("/user"), Router("/users")
        handler = Recorder()
        users.get("/:id", handler)
        main.compose(user).compose(users)

        await dispatch(main, "GET", "/users/1")
        assert handler.called

    @pytest.mark.asyncio
    async def test_first_matching_child_wins(self) -> None:
        """Delegation never backtracks to later siblings."""
        main = Router()
        broad, specific = Router(), Router("/admin")
        specific_handler = Recorder()
        specific.get("/panel", specific_handler)
        main.compose(broad).compose(specific)

        with pytest.raises(NotFound):
            await dispatch(main, "GET", "/admin/panel")
        assert not specific_handler.called

    @pytest.mark.asyncio
    async def test_not_found_in_child_reports_original_path(self) -> None:
        """NotFound carries method and un-normalized original path."""
        api, users = Router("/api"), Router("/users")
        users.get("/:id", Recorder())
        api.compose(users)

        with pytest.raises(NotFound) as info:
            await dispatch(api, "DELETE", "/api/users/1")
        assert info.value.message == "Route not found DELETE /api/users/1"
        assert info.value.details == {"method": "DELETE", "path": "/api/users/1"}


class TestMethods:
    """Tests for per-method registration."""

    @pytest.mark.asyncio
    async def test_all_methods(self) -> None:
        """Each verb helper registers its own method."""
        router = Router()
        handlers: dict[str, Recorder] = {}
        for method in ("get", "post", "put", "patch", "delete"):
            handlers[method] = Recorder()
            getattr(router, method)("/resource", handlers[method])

        for method, handler in handlers.items():
            await dispatch(router, method.upper(), "/resource")
            assert len(handler.calls) == 1, method

    @pytest.mark.asyncio
    async def test_wrong_method(self) -> None:
        """Path registered for GET only is not found for POST."""
        router = Router()
        router.get("/users", Recorder())
        with pytest.raises(NotFound):
            await dispatch(router, "POST", "/users")

    @pytest.mark.asyncio
    async def test_route_decorator(self) -> None:
        """route() registers every listed method and returns the handler."""
        router = Router()
        seen: list[str] = []

        @router.route("/items", methods=["GET", "post"])
        def items(ctx: Context) -> None:
            seen.append(ctx.request.method)

        assert callable(items)
        await dispatch(router, "GET", "/items")
        await dispatch(router, "POST", "/items")
        assert seen == ["GET", "POST"]


class TestRouterIsTerminal:
    """Tests for Router as the last middleware."""

    @pytest.mark.asyncio
    async def test_next_not_called_after_handler(self) -> None:
        """A matched handler ends the chain."""
        router = Router()
        router.get("/x", Recorder())
        calls: list[Any] = []

        async def next() -> None:
            calls.append(True)

        ctx, _ = make_ctx("GET", "/x")
        await router.handle(ctx, next)
        assert calls == []


class TestRouteListing:
    """Tests for routes() diagnostics."""

    def test_routes_include_children(self) -> None:
        """Child routes are listed with their full external path."""
        api, v1, users = Router("/api"), Router("/v1"), Router("/users")
        api.get("/", Recorder())
        users.get("/:id", Recorder())
        users.post("/", Recorder())
        v1.compose(users)
        api.compose(v1)

        assert sorted(api.routes()) == [
            ("GET", "/api"),
            ("GET", "/api/v1/users/:id"),
            ("POST", "/api/v1/users"),
        ]
