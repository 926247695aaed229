# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""JWT helpers over pyjwt.

Used by ``JWTGuard`` to verify bearer tokens and by applications (login
endpoints, tests) to issue them.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

__all__ = ["Tokens", "InvalidTokenError"]

InvalidTokenError = jwt.InvalidTokenError

DEFAULT_ALGORITHM = "HS256"


class Tokens:
    """Stateless sign/verify/decode for HMAC (or other pyjwt) tokens."""

    @staticmethod
    def sign(
        payload: dict[str, Any],
        secret: str,
        algorithm: str = DEFAULT_ALGORITHM,
        expires_in: int | None = None,
    ) -> str:
        """Encode payload as a signed token.

        Args:
            payload: Claims to embed.
            secret: Signing key.
            algorithm: pyjwt algorithm name.
            expires_in: Seconds until expiry; adds an ``exp`` claim.
        """
        claims = dict(payload)
        if expires_in is not None:
            claims["exp"] = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return jwt.encode(claims, secret, algorithm=algorithm)

    @staticmethod
    def verify(
        token: str,
        secret: str,
        algorithms: list[str] | tuple[str, ...] = (DEFAULT_ALGORITHM,),
    ) -> dict[str, Any]:
        """Check signature and expiry, return the claims.

        Raises:
            InvalidTokenError: Bad signature, malformed or expired token.
        """
        return jwt.decode(token, secret, algorithms=list(algorithms))

    @staticmethod
    def decode(token: str) -> dict[str, Any] | None:
        """Read claims without verifying. None if the token is malformed."""
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.DecodeError:
            return None
