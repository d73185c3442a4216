"""Transport layer implementations."""

from .base import (
    Channel,
    TransportError,
    TransportConnectionError,
)

from . import rabbitmq
