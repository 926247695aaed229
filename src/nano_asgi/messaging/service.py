# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Application-facing messaging facade.

Wraps ``RabbitMQClient`` with logging and the ``MessageHandler`` protocol.
Typically started and stopped from lifespan hooks and exposed to handlers
through ``MessagingMiddleware``::

    messaging = MessagingService(RabbitMQConfig(url=...))
    server.on_startup(messaging.start)
    server.on_shutdown(messaging.stop)
    server.add(MessagingMiddleware(messaging))

    @router.route("/orders", methods=["POST"])
    async def create_order(ctx):
        await ctx.payload.messaging.publish("orders", ctx.request.body)
"""

from __future__ import annotations

import logging
from typing import Any

from .client import RabbitMQClient, RabbitMQConfig
from .message import MessageHandler

__all__ = ["MessagingService"]


class MessagingService:
    """Publish/subscribe over one RabbitMQ client."""

    def __init__(
        self,
        config: RabbitMQConfig,
        client: RabbitMQClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("nano_asgi.messaging")
        self.client = client or RabbitMQClient(config, logger=self.logger)
        self.client.on("connected", self._on_connected)
        self.client.on("connection_failed", self._on_connection_failed)

    def _on_connected(self) -> None:
        self.logger.info("Messaging service connected")

    def _on_connection_failed(self) -> None:
        self.logger.error("Messaging service connection failed")

    async def start(self) -> None:
        await self.client.connect()

    async def stop(self) -> None:
        await self.client.disconnect()

    async def publish(self, queue_name: str, message: Any) -> None:
        """Publish message on queue_name. Failures are logged and re-raised."""
        try:
            await self.client.publish_to_queue(queue_name, message)
        except Exception as exc:
            self.logger.error(f"Failed to publish to queue '{queue_name}': {exc!r}")
            raise
        self.logger.info(f"Message published to queue '{queue_name}'")

    async def subscribe(self, queue_name: str, handler: MessageHandler) -> None:
        """Deliver every message of queue_name to ``handler.handle``."""

        async def deliver(data: Any) -> None:
            self.logger.info(f"Received message from queue '{queue_name}'")
            await handler.handle(data)

        await self.client.consume_queue(queue_name, deliver)

    def get_status(self) -> str:
        return self.client.status
