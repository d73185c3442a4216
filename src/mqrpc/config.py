""" Connection parameters for a :class:`mqrpc.Dispatcher`. Defaults come
    from the environment, optionally overridden by a JSON configuration
    file; explicit arguments to the dispatcher override both.
"""

import logging
import os

from . import json

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """ The supplied configuration cannot produce a working dispatcher.
    """


# Each entry is the configuration key, the environment variable consulted
# for its default, the default in the absence of that variable, and the
# conversion applied to whatever value is found. The default exchange is a
# named topic exchange: the broker's nameless default exchange does not
# accept queue bindings.

_environment = (
    ('host',     'MQRPC_AMQP_HOST',     'localhost', str),
    ('port',     'MQRPC_AMQP_PORT',     5672,        int),
    ('user',     'MQRPC_AMQP_USER',     'guest',     str),
    ('password', 'MQRPC_AMQP_PASS',     'guest',     str),
    ('vhost',    'MQRPC_AMQP_VHOST',    '/',         str),
    ('timeout',  'MQRPC_AMQP_TIMEOUT',  1,           float),
    ('exchange', 'MQRPC_AMQP_EXCHANGE', 'mqrpc',     str),
    ('queue',    'MQRPC_AMQP_QUEUE',    None,        str),
)

keys = tuple(entry[0] for entry in _environment)

aliases = {'pass': 'password'}


def defaults():
    """ Return a dictionary of connection parameters as established by the
        environment at the time of the call.
    """

    settings = dict()

    for key, variable, default, convert in _environment:
        try:
            value = os.environ[variable]
        except KeyError:
            value = default
        else:
            value = _convert(key, value, convert)

        settings[key] = value

    return settings


def load(filename=None):
    """ Return the :func:`defaults`, overlaid with the contents of the JSON
        file *filename* if one is specified. The file must contain a single
        JSON object; the keys are those found in :data:`keys`, with 'pass'
        accepted as an alias for 'password'.
    """

    settings = defaults()

    if filename is None:
        return settings

    try:
        with open(filename, 'rb') as contents:
            loaded = json.loads(contents.read())
    except OSError as e:
        raise ConfigurationError('cannot read configuration file %s: %s' % (filename, e))
    except ValueError as e:
        raise ConfigurationError('invalid JSON in configuration file %s: %s' % (filename, e))

    if not isinstance(loaded, dict):
        raise ConfigurationError('configuration file %s does not contain a JSON object' % (filename))

    logger.debug('loaded configuration from %s', filename)
    settings.update(normalize(loaded))
    return settings


def normalize(settings):
    """ Resolve aliases and convert values for a dictionary of connection
        parameters. Unknown keys are rejected; None values are passed through
        untouched.
    """

    converters = dict((entry[0], entry[3]) for entry in _environment)
    normalized = dict()

    for key, value in settings.items():
        key = aliases.get(key, key)

        try:
            convert = converters[key]
        except KeyError:
            raise ConfigurationError('unknown configuration key: ' + repr(key))

        if value is not None:
            value = _convert(key, value, convert)

        normalized[key] = value

    return normalized


def _convert(key, value, convert):

    try:
        return convert(value)
    except (TypeError, ValueError):
        raise ConfigurationError('invalid value for %s: %r' % (key, value))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
