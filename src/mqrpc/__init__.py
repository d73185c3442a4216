""" Python implementation of an RPC dispatcher riding on a RabbitMQ message
    broker. Requests arrive on a queue, are routed by name to a registered
    :class:`Method`, and the result is published back to the caller.
"""

# Utility components.

from . import json
from . import log
from . import weakref

# Submodules used by multiple other components.

from . import config
from . import protocol
from . import transport

# Primary public-facing interfaces.

from .method import Method, MethodError
from .registry import MethodRegistry, RegistrationError
from .dispatcher import Dispatcher

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
