# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Message envelope and consumer protocol."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

import orjson

__all__ = ["Message", "MessageHandler", "generate_message_id"]


def generate_message_id() -> str:
    """``msg_<epoch ms>_<9 hex chars>``."""
    return f"msg_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


@dataclass(slots=True)
class Message:
    """JSON envelope published on a queue.

    Wire form: ``{"id", "type", "timestamp", "data"}``; ``type`` is the
    Python type name of ``data``.
    """

    data: Any
    id: str = field(default_factory=generate_message_id)
    type: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.type:
            self.type = type(self.data).__name__

    def encode(self) -> bytes:
        return orjson.dumps(
            {"id": self.id, "type": self.type, "timestamp": self.timestamp, "data": self.data}
        )

    @classmethod
    def decode(cls, body: bytes) -> Message:
        """Parse an envelope. Missing fields get defaults, ``data`` becomes None."""
        raw = orjson.loads(body)
        timestamp = raw.get("timestamp")
        return cls(
            data=raw.get("data"),
            id=raw.get("id") or generate_message_id(),
            type=raw.get("type") or "",
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.now(timezone.utc),
        )


@runtime_checkable
class MessageHandler(Protocol):
    """Consumer of decoded message data."""

    async def handle(self, message: Any) -> None: ...
