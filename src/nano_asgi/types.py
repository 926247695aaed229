# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Type aliases shared across nano-asgi.

ASGI types
==========
The transport side of nano-asgi is plain ASGI. Scope and messages stay
``MutableMapping[str, Any]`` because servers are free to add their own
extension keys::

    Scope   = MutableMapping[str, Any]
    Message = MutableMapping[str, Any]
    Receive = Callable[[], Awaitable[Message]]
    Send    = Callable[[Message], Awaitable[None]]
    ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

Pipeline types
==============
``Next`` is the zero-argument continuation handed to every middleware.
Awaiting it runs the remainder of the chain.

``RouteHandler`` is what a Router dispatches to. It receives the request
Context and may be a plain function or a coroutine function::

    async def get_user(ctx: Context) -> None:
        await ctx.response.json({"id": ctx.request.params["id"]})
"""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, MutableMapping

if TYPE_CHECKING:
    from .context import Context

__all__ = [
    "ASGIApp",
    "Message",
    "Next",
    "Receive",
    "RouteHandler",
    "Scope",
    "Send",
]

# ASGI Scope - connection metadata
Scope = MutableMapping[str, Any]

# ASGI Message - sent/received data
Message = MutableMapping[str, Any]

# ASGI Receive - callable to receive messages
Receive = Callable[[], Awaitable[Message]]

# ASGI Send - callable to send messages
Send = Callable[[Message], Awaitable[None]]

# ASGI Application - the main callable
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

# Continuation passed to middleware: runs the rest of the chain
Next = Callable[[], Awaitable[None]]

# Route handler - sync or async, receives the request Context
RouteHandler = Callable[["Context"], Any]
