"""
mqrpc Protocol Layer
====================

The request and reply structures exchanged with a remote caller, with no
knowledge of how they are carried.

Envelope (envelope.py)
    One inbound request: header metadata, delivery metadata, payload.
    Derives the reply target, if any.

Reply (reply.py)
    The reply wire body, success and error shapes:

        {"error": 0, "results": <anything>}
        {"error": 1, "error_text": <string>, "results": null}

    and the publish-then-acknowledge sequence that delivers it.

The protocol layer MUST NOT depend on a broker client library; a transport
converts its own deliveries into an :class:`Envelope` before handing them
upward.
"""

from . import envelope
from . import reply

from .envelope import Envelope
from .reply import ReplyTarget

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
