"""Reply wire format, and delivery of replies back to the caller."""

from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional, Union

from .. import json

logger = logging.getLogger(__name__)


class ReplyTarget(NamedTuple):
    """Where the single reply for one request is addressed."""

    exchange: str
    routing_key: str
    correlation_id: Optional[str]


def success(results: Any) -> dict:
    return {"error": 0, "results": results}


def error(text: str) -> dict:
    return {"error": 1, "error_text": text, "results": None}


def encode(body: dict) -> bytes:
    return json.dumps(body)


def send(channel, target: Optional[ReplyTarget], body: Union[dict, bytes], delivery_tag) -> None:
    """Publish *body* to *target*, then acknowledge the inbound message.

    The *body* is either a reply dictionary or its already encoded form.

    No publish happens when *target* is None (the caller asked for no
    reply). The acknowledgement is issued exactly once either way, even
    if the publish fails; a failed publish is still raised to the caller.
    """

    try:
        if target is None:
            logger.debug("no reply target, acknowledging only")
        else:
            channel.publish(
                exchange=target.exchange,
                routing_key=target.routing_key,
                correlation_id=target.correlation_id,
                body=body if isinstance(body, bytes) else encode(body),
            )
    finally:
        channel.ack(delivery_tag)
