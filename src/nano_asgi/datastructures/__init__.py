# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Data structures wrapping raw ASGI values.

Mapping from ASGI to nano-asgi classes::

    scope["headers"] = [(b"...", b"...")]  →  Headers (case-insensitive, mutable)
    scope["query_string"] = b"a=1&b=2"     →  QueryParams (parsed)
    per-request extensions                 →  State (attribute access)
"""

from .headers import Headers, headers_from_scope
from .query_params import QueryParams, query_params_from_scope
from .state import State

__all__ = [
    "Headers",
    "QueryParams",
    "State",
    "headers_from_scope",
    "query_params_from_scope",
]
