""" Console logging for applications built on :mod:`mqrpc`. Every module in
    the package logs via ``logging.getLogger(__name__)``; nothing is emitted
    until the application configures a handler, either on its own or by
    calling :func:`setup`.
"""

import logging
import sys

format = '%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s'
datefmt = '%Y-%m-%d %H:%M:%S'


def setup(level=logging.INFO, stream=None):
    """ Attach a console handler to the ``mqrpc`` logger and set its *level*.
        Repeated calls only adjust the level. The handler writes to
        *stream*, or standard error if no stream is specified.
    """

    logger = logging.getLogger('mqrpc')
    logger.setLevel(level)

    for handler in logger.handlers:
        if getattr(handler, '_mqrpc', False):
            return logger

    if stream is None:
        stream = sys.stderr

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(format, datefmt))
    handler._mqrpc = True
    logger.addHandler(handler)

    return logger


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
