# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""RabbitMQ messaging: client, service facade and message envelope."""

from .client import QueueConfig, RabbitMQClient, RabbitMQConfig
from .message import Message, MessageHandler
from .service import MessagingService

__all__ = [
    "Message",
    "MessageHandler",
    "MessagingService",
    "QueueConfig",
    "RabbitMQClient",
    "RabbitMQConfig",
]
