"""Inbound request envelope."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .reply import ReplyTarget


class Envelope:
    """One inbound request, as delivered by the broker.

    The *header* carries the caller's metadata: ``no_reply``,
    ``correlation_id`` and ``reply_to``. The *deliver* record describes the
    delivery itself: ``exchange``, ``routing_key``, the source ``queue``,
    and the ``delivery_tag`` used to acknowledge it. The *payload* is the
    raw message body, expected to decode as a JSON object.
    """

    def __init__(
        self,
        header: Optional[Dict[str, Any]] = None,
        deliver: Optional[Dict[str, Any]] = None,
        payload: Optional[bytes] = None,
    ):
        self.header = dict(header or {})
        self.deliver = dict(deliver or {})
        self.payload = payload

    def __repr__(self) -> str:
        return "Envelope(header=%r, deliver=%r, payload=%r)" % (
            self.header,
            self.deliver,
            self.payload,
        )

    @property
    def no_reply(self) -> bool:
        flag = self.header.get("no_reply")
        try:
            return int(flag) == 1
        except (TypeError, ValueError):
            return False

    @property
    def routing_key(self) -> Optional[str]:
        """The method name requested, or None if there isn't one."""
        key = self.deliver.get("routing_key")
        if key in (None, "", b""):
            return None
        if isinstance(key, bytes):
            key = key.decode("utf-8", "replace")
        return key

    @property
    def delivery_tag(self):
        return self.deliver.get("delivery_tag")

    def reply_target(self) -> Optional[ReplyTarget]:
        """Return the :class:`ReplyTarget` for this request.

        None is returned when the caller set ``no_reply``, or did not say
        where a reply should go.
        """

        if self.no_reply:
            return None

        reply_to = self.header.get("reply_to")
        if not reply_to:
            return None

        return ReplyTarget(
            exchange=self.deliver.get("exchange") or "",
            routing_key=reply_to,
            correlation_id=self.header.get("correlation_id"),
        )
