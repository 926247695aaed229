# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Context - per-request state threaded through the middleware chain.

The server builds one Context per request and passes the same instance to
every middleware and to the route handler. A Context is never shared
between requests.

Cross-cutting extensions live in typed slots on ``Payload`` rather than as
ad hoc attributes:

- ``identity``: decoded auth token claims, set by ``JWTGuard``
- ``messaging``: messaging service, set by ``MessagingMiddleware``
- ``state``: free-form ``State`` for application-specific values
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .datastructures import State

if TYPE_CHECKING:
    from .messaging import MessagingService
    from .request import Request
    from .response import Response

__all__ = ["Context", "Payload"]


@dataclass(slots=True)
class Payload:
    """Mutable extension point of a Context."""

    identity: dict[str, Any] | None = None
    messaging: MessagingService | None = None
    state: State = field(default_factory=State)


@dataclass(slots=True)
class Context:
    """Per-request bag: request, response and payload.

    Attributes:
        request: The incoming request.
        response: The pending response.
        payload: Extension slots filled by middleware.
    """

    request: Request
    response: Response
    payload: Payload = field(default_factory=Payload)

    def __repr__(self) -> str:
        return f"<Context {self.request.method} {self.request.original_path}>"
