# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception classes for nano-asgi request processing.

Handlers and middleware signal failure by raising, never by returning an
error value. The ``ExceptionHandler`` middleware is the single recovery
point that turns these exceptions into HTTP responses.

Module Structure
----------------
HTTPException - classified error carrying status code, message, details
    ├── BadRequest           400
    │     └── BodyParseError 400 (malformed JSON body)
    ├── Unauthorized         401
    ├── Forbidden            403
    ├── NotFound             404
    ├── Conflict             409
    ├── UnprocessableEntity  422
    ├── TooManyRequests      429
    └── InternalServerError  500

ClientDisconnect - transport failure while draining the request body
ConfigError      - invalid or missing configuration
MessagingError   - messaging client used while not connected

Translation rules
-----------------
- 4xx HTTPException: status and message are sent to the client as
  ``{"status": <int>, "message": <str>}``.
- Anything else (unclassified, or a classified 5xx): a fixed 500
  ``Internal Server Error``. The original message never reaches the client,
  it only goes to the operator log.

Every client error has a default message (``HttpErrorMessage``) that can be
overridden, plus optional structured ``details`` for diagnostics::

    >>> raise NotFound()
    >>> raise NotFound("User 42 not found", details={"user_id": 42})
    >>> raise Unauthorized(headers={"WWW-Authenticate": "Bearer"})
"""

from __future__ import annotations

from enum import Enum
from typing import Any

__all__ = [
    "HttpErrorMessage",
    "HTTPException",
    "BadRequest",
    "BodyParseError",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "Conflict",
    "UnprocessableEntity",
    "TooManyRequests",
    "InternalServerError",
    "ClientDisconnect",
    "ConfigError",
    "MessagingError",
]


class HttpErrorMessage(str, Enum):
    """Default messages for classified errors."""

    BAD_REQUEST = "Bad Request"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "Not Found"
    CONFLICT = "Conflict"
    UNPROCESSABLE_ENTITY = "Unprocessable Entity"
    TOO_MANY_REQUESTS = "Too Many Requests"
    INTERNAL_SERVER_ERROR = "Internal Server Error"

    def __str__(self) -> str:
        return self.value


class HTTPException(Exception):
    """
    Classified HTTP error with status code, message and details.

    Raise this (or one of its subclasses) from handlers or middleware.
    ``ExceptionHandler`` converts it to a response.

    Attributes:
        status_code: HTTP status code (expected 4xx or 5xx, not validated)
        message: Message disclosed to the client for 4xx errors
        details: Optional structured data for diagnostics (never sent)
        headers: Extra response headers as list of tuples, or None

    Example:
        >>> raise HTTPException(409, "Email already registered")
        >>> raise HTTPException(401, headers={"WWW-Authenticate": "Bearer"})
    """

    default_message: str = ""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        details: Any = None,
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        """
        Initialize HTTP exception.

        Args:
            status_code: HTTP status code.
            message: Client-facing message. Defaults to the class default.
            details: Optional diagnostic payload.
            headers: Response headers as dict or list of tuples.
                     Dict is converted to list to support duplicate names.
        """
        self.status_code = status_code
        self.message = message if message is not None else str(self.default_message)
        self.details = details
        if headers is None:
            self.headers: list[tuple[str, str]] | None = None
        elif isinstance(headers, dict):
            self.headers = list(headers.items())
        else:
            self.headers = list(headers)
        super().__init__(self.message)

    @property
    def is_client_error(self) -> bool:
        """True for 4xx status codes."""
        return 400 <= self.status_code < 500

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(status_code={self.status_code}, "
            f"message={self.message!r})"
        )


class _ClassifiedError(HTTPException):
    """Base for errors with a fixed status code."""

    status: int = 500

    def __init__(
        self,
        message: str | None = None,
        details: Any = None,
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> None:
        super().__init__(self.status, message, details=details, headers=headers)


class BadRequest(_ClassifiedError):
    """HTTP 400 Bad Request."""

    status = 400
    default_message = HttpErrorMessage.BAD_REQUEST


class BodyParseError(BadRequest):
    """Request body could not be decoded as declared by its content type."""

    default_message = "Invalid JSON in request body"


class Unauthorized(_ClassifiedError):
    """HTTP 401 Unauthorized."""

    status = 401
    default_message = HttpErrorMessage.UNAUTHORIZED


class Forbidden(_ClassifiedError):
    """HTTP 403 Forbidden."""

    status = 403
    default_message = HttpErrorMessage.FORBIDDEN


class NotFound(_ClassifiedError):
    """HTTP 404 Not Found.

    Raised by the Router when no route matches. In that case ``details``
    holds ``{"method": ..., "path": ...}`` with the un-normalized path.
    """

    status = 404
    default_message = HttpErrorMessage.NOT_FOUND


class Conflict(_ClassifiedError):
    """HTTP 409 Conflict."""

    status = 409
    default_message = HttpErrorMessage.CONFLICT


class UnprocessableEntity(_ClassifiedError):
    """HTTP 422 Unprocessable Entity."""

    status = 422
    default_message = HttpErrorMessage.UNPROCESSABLE_ENTITY


class TooManyRequests(_ClassifiedError):
    """HTTP 429 Too Many Requests."""

    status = 429
    default_message = HttpErrorMessage.TOO_MANY_REQUESTS


class InternalServerError(_ClassifiedError):
    """HTTP 500 Internal Server Error. The message is never disclosed."""

    status = 500
    default_message = HttpErrorMessage.INTERNAL_SERVER_ERROR


class ClientDisconnect(Exception):
    """Raised when the client goes away before the request body is complete."""


class ConfigError(Exception):
    """Configuration error."""


class MessagingError(Exception):
    """Messaging client is not usable (e.g. not connected)."""
