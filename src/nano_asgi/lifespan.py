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
ASGI Lifespan Management.

Purpose
=======
ServerLifespan answers the ASGI lifespan protocol for NanoServer, running
the hooks registered with ``on_startup`` / ``on_shutdown``.

Definition::

    class ServerLifespan:
        __slots__ = ("server", "_logger", "_started")

        def __init__(self, server: NanoServer)
        async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None
        async def startup(self) -> None
        async def shutdown(self) -> None

Design Notes
============
- Hooks may be sync or async callables taking no arguments.
- Startup hooks run in registration order; the first failure aborts startup
  and is reported as ``lifespan.startup.failed``.
- Shutdown hooks run in reverse registration order; errors are logged and
  do not prevent the remaining hooks from running.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .types import Receive, Scope, Send
from .utils import invoke

if TYPE_CHECKING:
    from .server import NanoServer

__all__ = ["ServerLifespan"]


class ServerLifespan:
    """
    ASGI Lifespan handler for NanoServer.

    Attributes:
        server: The NanoServer whose hooks are run.
    """

    __slots__ = ("server", "_logger", "_started")

    def __init__(self, server: NanoServer, logger: logging.Logger | None = None) -> None:
        self.server = server
        self._logger = logger or logging.getLogger("nano_asgi.lifespan")
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def __call__(
        self, scope: Scope, receive: Receive, send: Send  # noqa: ARG002
    ) -> None:
        """Handle ASGI lifespan protocol until shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as e:
                    self._logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(e)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                try:
                    await self.shutdown()
                finally:
                    await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in order, then log the route table."""
        self._logger.info("NanoServer starting up...")
        for hook in self.server.startup_hooks:
            await invoke(hook)

        for method, path in self.server.routes():
            self._logger.debug(f"Route {method} {path}")

        self._started = True
        self._logger.info("NanoServer started")

    async def shutdown(self) -> None:
        """Run shutdown hooks in reverse order; each failure is logged."""
        self._logger.info("NanoServer shutting down...")
        for hook in reversed(self.server.shutdown_hooks):
            try:
                await invoke(hook)
            except Exception:
                self._logger.exception(f"Error in shutdown hook {hook!r}")

        self._started = False
        self._logger.info("NanoServer stopped")
