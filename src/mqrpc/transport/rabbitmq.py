"""RabbitMQ transport, built on a pika blocking connection."""

from __future__ import annotations

import contextlib
import logging
from typing import Callable, Optional

import pika
import pika.exceptions

from ..protocol.envelope import Envelope
from .base import Channel, TransportConnectionError, TransportError

logger = logging.getLogger(__name__)


def _broker_params(
    host: str,
    port: int,
    user: str,
    password: str,
    vhost: str,
    timeout: float,
) -> pika.ConnectionParameters:
    return pika.ConnectionParameters(
        host=host,
        port=int(port),
        virtual_host=vhost,
        credentials=pika.PlainCredentials(user, password),
        socket_timeout=timeout,
        heartbeat=600,
        blocked_connection_timeout=300,
    )


def connect(
    host: str,
    port: int,
    user: str,
    password: str,
    vhost: str,
    timeout: float,
    exchange: str,
    queue: Optional[str],
    exclusive: bool = False,
) -> "RabbitChannel":
    """Open a connection and prepare the consuming queue.

    The *exchange*, when named, is declared as a topic exchange. A *queue*
    of None asks the broker to name the queue. Any failure along the way is
    raised as :class:`TransportConnectionError`.
    """

    params = _broker_params(host, port, user, password, vhost, timeout)

    try:
        connection = pika.BlockingConnection(params)
    except (pika.exceptions.AMQPError, OSError) as e:
        raise TransportConnectionError(
            f"unable to connect to AMQP broker at {host}:{port}{vhost}: {e!r}"
        ) from e

    try:
        channel = connection.channel()

        if exchange:
            channel.exchange_declare(
                exchange=exchange, exchange_type="topic", durable=False
            )

        result = channel.queue_declare(queue=queue or "", exclusive=exclusive)
        queue_name = result.method.queue

        channel.basic_qos(prefetch_count=1)
    except pika.exceptions.AMQPError as e:
        _close(connection)
        raise TransportConnectionError(
            f"unable to set up queue {queue!r} on exchange {exchange!r}: {e!r}"
        ) from e

    logger.debug("connected to %s:%s%s, queue %s", host, port, vhost, queue_name)
    return RabbitChannel(connection, channel, queue_name)


class RabbitChannel(Channel):
    """A pika channel consuming from a single queue."""

    def __init__(self, connection, channel, queue: str):
        self.queue = queue
        self._connection = connection
        self._channel = channel
        self._on_message: Optional[Callable[[Envelope], None]] = None

    @property
    def is_open(self) -> bool:
        return bool(self._connection.is_open and self._channel.is_open)

    def consume(self, on_message: Callable[[Envelope], None]) -> None:
        self._on_message = on_message
        self._channel.basic_consume(
            queue=self.queue,
            on_message_callback=self._on_delivery,
        )

    def _on_delivery(self, _ch, method, properties, body: bytes) -> None:
        self._on_message(to_envelope(self.queue, method, properties, body))

    def bind_queue(self, queue: str, exchange: str, routing_key: str) -> None:
        # BlockingChannel.queue_bind() waits for the broker's Bind-Ok.
        with _translated(f"unable to bind {routing_key!r} on {exchange!r}"):
            self._channel.queue_bind(
                queue=queue,
                exchange=exchange,
                routing_key=routing_key,
            )

    def publish(
        self,
        exchange: str,
        routing_key: str,
        correlation_id: Optional[str],
        body: bytes,
    ) -> None:
        with _translated(f"unable to publish to {routing_key!r} on {exchange!r}"):
            self._channel.basic_publish(
                exchange=exchange,
                routing_key=routing_key,
                properties=pika.BasicProperties(
                    correlation_id=correlation_id,
                    content_type="application/json",
                ),
                body=body,
            )

    def ack(self, delivery_tag) -> None:
        with _translated(f"unable to acknowledge delivery {delivery_tag!r}"):
            self._channel.basic_ack(delivery_tag=delivery_tag)

    def start_consuming(self) -> None:
        with _translated(f"consuming from {self.queue!r} failed"):
            self._channel.start_consuming()

    def stop_consuming(self) -> None:
        with _translated(f"unable to stop consuming from {self.queue!r}"):
            self._channel.stop_consuming()

    def close(self) -> None:
        _close(self._connection)


def to_envelope(queue: str, method, properties, body: bytes) -> Envelope:
    """Convert one pika delivery into an :class:`Envelope`."""

    headers = properties.headers or {}

    header = {
        "no_reply": headers.get("no_reply"),
        "correlation_id": properties.correlation_id,
        "reply_to": properties.reply_to,
    }

    deliver = {
        "exchange": method.exchange,
        "routing_key": method.routing_key,
        "queue": queue,
        "delivery_tag": method.delivery_tag,
    }

    return Envelope(header, deliver, body)


@contextlib.contextmanager
def _translated(what: str):
    """Raise pika errors as transport errors, prefixed with *what*.

    Connection-level failures, such as a lost stream, become
    :class:`TransportConnectionError`; anything else on the channel
    becomes :class:`TransportError`.
    """

    try:
        yield
    except pika.exceptions.AMQPConnectionError as e:
        raise TransportConnectionError(f"{what}: {e!r}") from e
    except pika.exceptions.AMQPError as e:
        raise TransportError(f"{what}: {e!r}") from e


def _close(connection) -> None:
    if connection.is_open:
        try:
            connection.close()
        except pika.exceptions.AMQPError:
            logger.debug("error closing AMQP connection", exc_info=True)
