# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Routing: the Router middleware and its route table types."""

from .route import MethodRoutes, RouteEntry, RouteMatch, compile_path, normalize_path
from .router import Router

__all__ = [
    "MethodRoutes",
    "RouteEntry",
    "RouteMatch",
    "Router",
    "compile_path",
    "normalize_path",
]
