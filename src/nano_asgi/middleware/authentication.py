# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""JWT bearer-token guard.

Verifies ``Authorization: Bearer <token>`` with pyjwt and stores the decoded
claims on ``ctx.payload.identity`` for downstream handlers.

Failures raise ``Unauthorized`` (401), translated by the exception handler:
    - no Authorization header: "Unauthorized"
    - scheme other than Bearer: "Missing Bearer token"
    - bad signature, malformed or expired: "Invalid or expired token"

Requests whose path is listed in ``exclude_paths`` pass through unchecked.

Config:
    secret (str): Signing secret. Default: $NANO_JWT_SECRET or "change_me_secret".
    exclude (list|str): Paths that skip the check. Default: [].
    algorithm (str): pyjwt algorithm. Default: "HS256".

Example:
    Enable in config.toml::

        [middleware]
        auth = "on"

        [auth]
        secret = "${JWT_SECRET}"
        exclude = ["/login", "/health"]
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from . import BaseMiddleware
from ..exceptions import HttpErrorMessage, Unauthorized
from ..utils import split_and_strip
from ..utils.tokens import InvalidTokenError, Tokens

if TYPE_CHECKING:
    from ..context import Context
    from ..types import Next

__all__ = ["JWTGuard"]

SECRET_ENV_VAR = "NANO_JWT_SECRET"
DEFAULT_SECRET = "change_me_secret"

_CHALLENGE = [("www-authenticate", 'Bearer realm="api"')]


class JWTGuard(BaseMiddleware):
    """Rejects requests without a valid bearer token.

    Attributes:
        secret: Verification key.
        exclude_paths: Exact paths that bypass the guard.
        algorithms: Accepted signing algorithms.

    Class Attributes:
        middleware_name: "auth" - identifier for config.
        middleware_order: 400 - runs after CORS.
        middleware_default: False - disabled by default.
    """

    middleware_name = "auth"
    middleware_order = 400
    middleware_default = False

    def __init__(
        self,
        secret: str | None = None,
        exclude_paths: Iterable[str] | None = None,
        algorithms: Iterable[str] = ("HS256",),
        logger: logging.Logger | None = None,
    ) -> None:
        self.secret = secret or os.environ.get(SECRET_ENV_VAR) or DEFAULT_SECRET
        self.exclude_paths = frozenset(exclude_paths or ())
        self.algorithms = tuple(algorithms)
        self.logger = logger or logging.getLogger("nano_asgi.auth")
        if self.secret == DEFAULT_SECRET:
            self.logger.warning(
                f"JWTGuard is using the default secret, set {SECRET_ENV_VAR} in production"
            )

    @classmethod
    def from_config(cls, options: Mapping[str, Any]) -> JWTGuard:
        return cls(
            secret=options.get("secret"),
            exclude_paths=split_and_strip(options.get("exclude")),
            algorithms=split_and_strip(options.get("algorithm"), ["HS256"]),
        )

    def is_excluded(self, path: str) -> bool:
        return path in self.exclude_paths

    def _bearer_token(self, ctx: Context) -> str:
        """Extract the token from the Authorization header."""
        auth_header = ctx.request.get_header("authorization")
        if not auth_header:
            raise Unauthorized(HttpErrorMessage.UNAUTHORIZED.value, headers=_CHALLENGE)
        if not auth_header.startswith("Bearer "):
            raise Unauthorized("Missing Bearer token", headers=_CHALLENGE)
        return auth_header.split(" ", 1)[1].strip()

    async def handle(self, ctx: Context, next: Next) -> None:
        if self.is_excluded(ctx.request.path):
            await next()
            return

        token = self._bearer_token(ctx)
        try:
            claims = Tokens.verify(token, self.secret, self.algorithms)
        except InvalidTokenError as exc:
            self.logger.debug(f"Rejected token on {ctx.request.original_path}: {exc}")
            raise Unauthorized("Invalid or expired token", headers=_CHALLENGE) from exc

        ctx.payload.identity = claims
        await next()
