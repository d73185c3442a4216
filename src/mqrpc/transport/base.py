"""Transport interface.

This is the (small) contract a broker transport must satisfy for the
dispatcher to drive it. It lives outside :mod:`mqrpc.protocol` so the
protocol remains broker-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..protocol.envelope import Envelope


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class Channel(ABC):
    """An open channel to the broker, bound to one consuming queue.

    All calls are expected on the thread running :meth:`start_consuming`;
    no method here is thread-safe.
    """

    queue: Optional[str] = None

    @abstractmethod
    def consume(self, on_message: Callable[[Envelope], None]) -> None:
        """Deliver every message arriving on :attr:`queue` to *on_message*."""

    @abstractmethod
    def bind_queue(self, queue: str, exchange: str, routing_key: str) -> None:
        """Bind *queue* to *exchange* for *routing_key*.

        Returns only once the broker has confirmed the binding.
        """

    @abstractmethod
    def publish(
        self,
        exchange: str,
        routing_key: str,
        correlation_id: Optional[str],
        body: bytes,
    ) -> None:
        """Publish *body*, tagged with *correlation_id*."""

    @abstractmethod
    def ack(self, delivery_tag) -> None:
        """Acknowledge one delivered message."""

    @abstractmethod
    def start_consuming(self) -> None:
        """Run the delivery loop; blocks until :meth:`stop_consuming`."""

    @abstractmethod
    def stop_consuming(self) -> None:
        """Make :meth:`start_consuming` return. The connection stays open."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection."""

    @property
    def is_open(self) -> bool:
        """Whether the channel is currently usable."""
        return False
