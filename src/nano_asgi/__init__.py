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

"""nano-asgi - minimal composable HTTP toolkit on ASGI.

A Router with nested composition, a continuation-passing middleware chain
and typed HTTP errors, served by uvicorn.

Quick start::

    from nano_asgi import NanoServer, Router

    router = Router()

    @router.route("/ping")
    async def ping(ctx):
        await ctx.response.json({"pong": True})

    server = NanoServer()
    server.add(router)
    server.run()  # Starts uvicorn on 127.0.0.1:3000
"""

__version__ = "0.1.0"

from .config import ServerConfig
from .context import Context, Payload
from .datastructures import Headers, QueryParams, State
from .dispatcher import Dispatcher
from .exceptions import (
    BadRequest,
    BodyParseError,
    ClientDisconnect,
    ConfigError,
    Conflict,
    Forbidden,
    HTTPException,
    HttpErrorMessage,
    InternalServerError,
    MessagingError,
    NotFound,
    TooManyRequests,
    Unauthorized,
    UnprocessableEntity,
)
from .middleware import BaseMiddleware, FunctionMiddleware
from .middleware.authentication import JWTGuard
from .middleware.body_parser import BodyParser
from .middleware.cors import CORSMiddleware
from .middleware.errors import ExceptionHandler
from .middleware.messaging import MessagingMiddleware
from .middleware.request_logger import RequestLogger
from .request import HttpMethod, Request
from .response import Response
from .routing import Router
from .server import NanoServer

__all__ = [
    "__version__",
    # Server
    "NanoServer",
    "ServerConfig",
    "Dispatcher",
    # Request/Response
    "Context",
    "Payload",
    "Request",
    "Response",
    "HttpMethod",
    "Headers",
    "QueryParams",
    "State",
    # Routing
    "Router",
    # Middleware
    "BaseMiddleware",
    "FunctionMiddleware",
    "ExceptionHandler",
    "BodyParser",
    "RequestLogger",
    "CORSMiddleware",
    "JWTGuard",
    "MessagingMiddleware",
    # Exceptions
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
