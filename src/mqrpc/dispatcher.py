""" The :class:`Dispatcher` is the server side of an RPC exchange carried
    over a message broker: it receives requests on a queue, hands each one
    to the registered :class:`mqrpc.Method` named by the routing key, and
    publishes the result back to the caller.
"""

import logging

from . import config
from . import introspection
from . import protocol
from . import registry
from .method import MethodError
from .transport import TransportError
from .transport import rabbitmq

logger = logging.getLogger(__name__)

DISCONNECTED = 'disconnected'
CONNECTED = 'connected'
CONSUMING = 'consuming'
FAILED = 'failed'


class Dispatcher:
    """ A :class:`Dispatcher` connects to the broker as soon as it is
        created, and registers the built-in help method; the caller then
        registers its own methods via :func:`register_method`, and commences
        handling requests with :func:`start_consuming`.

        The *topic* is required; it is the default prefix for every method
        name registered with this dispatcher. The remaining connection
        parameters default to the values established by
        :func:`mqrpc.config.defaults`. The *queue* is the queue consumed
        for requests; if it is not specified the broker will choose a name.
        Method names are bound as routing keys on the topic *exchange*.

        The *state* is handed, unmodified, to every method callback; the
        dispatcher does not interpret it. The *default_input_validators* are
        applied to the input parameters of every request, see
        :func:`mqrpc.Method.handle_request`.

        The *connect* argument is the transport factory, a callable with the
        signature of :func:`mqrpc.transport.rabbitmq.connect`.

        :ivar status: One of 'disconnected', 'connected', 'consuming', or
            'failed'.
        :ivar state: The shared state handed to each method callback.
    """

    def __init__(self, topic, host=None, port=None, user=None, password=None,
                 vhost=None, timeout=None, queue=None, exchange=None,
                 state=None, default_input_validators=(), connect=None):

        if topic is None or topic == '':
            logger.error('No topic defined!!!')
            raise config.ConfigurationError('a topic is required')

        overrides = dict()
        overrides['host'] = host
        overrides['port'] = port
        overrides['user'] = user
        overrides['password'] = password
        overrides['vhost'] = vhost
        overrides['timeout'] = timeout
        overrides['queue'] = queue
        overrides['exchange'] = exchange

        settings = config.defaults()

        for key, value in config.normalize(overrides).items():
            if value is not None:
                settings[key] = value

        if connect is None:
            connect = rabbitmq.connect

        self.topic = topic
        self.settings = settings
        self.state = state
        self.default_input_validators = tuple(default_input_validators)

        self.channel = None
        self.error = None
        self.registry = registry.MethodRegistry(topic)
        self.status = DISCONNECTED

        self._connect = connect
        self._open()

        self.register_method(introspection.help_method())


    @classmethod
    def from_config(cls, topic, filename=None, **kwargs):
        """ Create a :class:`Dispatcher` whose connection parameters come from
            :func:`mqrpc.config.load`; any *kwargs* are passed through to the
            constructor and take precedence.
        """

        settings = config.load(filename)
        settings.update(kwargs)
        return cls(topic, **settings)


    @property
    def connected(self):
        return self.status == CONNECTED or self.status == CONSUMING


    @property
    def consuming(self):
        return self.status == CONSUMING


    @property
    def exchange(self):
        return self.settings['exchange']


    def _open(self):
        """ Establish the broker connection, and route every delivered
            message to :func:`handle_request`.
        """

        settings = self.settings
        logger.debug('Connecting to RabbitMQ at %s:%s', settings['host'], settings['port'])

        try:
            channel = self._connect(host=settings['host'],
                                    port=settings['port'],
                                    user=settings['user'],
                                    password=settings['password'],
                                    vhost=settings['vhost'],
                                    timeout=settings['timeout'],
                                    exchange=settings['exchange'],
                                    queue=settings['queue'],
                                    exclusive=False)
        except TransportError as e:
            self.status = FAILED
            self._set_error('Unable to connect to RabbitMQ: ' + str(e))
            raise

        self.channel = channel
        self.status = CONNECTED
        channel.consume(self.handle_request)


    def bind(self, name):
        """ Bind the routing key *name* to the request queue. This blocks
            until the broker confirms the binding.
        """

        if not self.connected:
            raise TransportError('cannot bind ' + name + ' while ' + self.status)

        self.channel.bind_queue(self.channel.queue, self.exchange, name)
        logger.debug('bound %s to queue %s', name, self.channel.queue)


    def register_method(self, method):
        """ Register a :class:`mqrpc.Method`, rewriting its name to the
            fully qualified form, and bind that name on the broker. Returns
            True if the method was registered; if it was rejected, the error
            is logged, available via :func:`get_error`, and False is returned.

            Registration is expected to happen before :func:`start_consuming`;
            each binding blocks until the broker confirms it.
        """

        if not self.connected:
            raise TransportError('cannot register methods while ' + self.status)

        try:
            name = self.registry.add(method)
        except registry.RegistrationError as e:
            self._set_error(str(e))
            return False

        method.set_dispatcher(self)

        try:
            self.bind(name)
        except TransportError as e:
            self.registry.remove(name)
            method.update_name(method.bare_name)
            method.set_dispatcher(None)
            self.status = FAILED
            self._set_error('unable to bind %s: %s' % (name, e))
            raise

        return True


    def start_consuming(self):
        """ Handle requests until :func:`stop_consuming` is called. Please
            note that this call blocks, potentially forever; the only way
            out is a call to :func:`stop_consuming` from within a method
            callback.
        """

        if not self.connected:
            raise TransportError('cannot consume while ' + self.status)

        self.status = CONSUMING

        try:
            self.channel.start_consuming()
        except TransportError as e:
            self.status = FAILED
            self._set_error('consuming stopped: ' + str(e))
            raise
        finally:
            if self.status == CONSUMING:
                self.status = CONNECTED


    def stop_consuming(self):
        """ Release a blocking :func:`start_consuming` call. The broker
            connection remains open.
        """

        if self.status == CONSUMING:
            self.status = CONNECTED

        if self.channel is not None:
            self.channel.stop_consuming()


    def close(self):

        if self.channel is not None:
            self.channel.close()
            self.channel = None

        self.status = DISCONNECTED


    def handle_request(self, envelope):
        """ All inbound requests are filtered through this method. The
            routing key of the *envelope* names the method to invoke; a
            request without one is handled by the default method. The result
            of the method, or the error it raised, is published to the reply
            target of the envelope, and the request is acknowledged.

            Returns True if the method was invoked successfully. Errors are
            never raised from here: they are returned to the caller instead.
        """

        reply_to = envelope.reply_target()

        if reply_to is None:
            logger.debug('No Reply specified')
        else:
            logger.debug('Has reply specified')

        name = envelope.routing_key

        if name is None:
            name = self.registry.default

        if name is None:
            name = introspection.name

        method = self.registry.get(name)

        if method is None:
            self._set_error('unknown method: ' + name)
            self._reply(envelope, reply_to, protocol.reply.error(self.error))
            return False

        try:
            results = method.handle_request(envelope, self.state, self.default_input_validators)
        except MethodError as e:
            self._set_error(str(e))
            body = protocol.reply.error(self.error)
        except Exception as e:
            logger.exception('%s raised an exception', name)
            self._set_error('%s: %s' % (e.__class__.__name__, e))
            body = protocol.reply.error(self.error)
        else:
            body = protocol.reply.success(results)

        return self._reply(envelope, reply_to, body)


    def _reply(self, envelope, reply_to, body):
        """ Send *body* to *reply_to*, and acknowledge *envelope*. A result
            that cannot be encoded is replaced by an error reply. A failure
            to publish is logged, not raised; the request loop must survive
            a reply that cannot be delivered.

            Returns True if the reply sent was a success reply.
        """

        try:
            encoded = protocol.reply.encode(body)
        except TypeError as e:
            logger.exception('unable to encode reply from %s', envelope.routing_key)
            self._set_error('%s: %s' % (e.__class__.__name__, e))
            body = protocol.reply.error(self.error)
            encoded = protocol.reply.encode(body)

        try:
            protocol.reply.send(self.channel, reply_to, encoded, envelope.delivery_tag)
        except Exception as e:
            logger.exception('unable to reply to %s', reply_to)
            self._set_error('unable to reply: ' + str(e))
            return False

        return body['error'] == 0


    def get_method_list(self):
        """ Return the sorted list of registered method names.
        """

        return self.registry.names()


    def get_method(self, name):
        """ Return the registered method for *name*, or None.
        """

        return self.registry.get(name)


    def get_error(self):
        """ Return the last error encountered, or None.
        """

        return self.error


    def _set_error(self, error):
        logger.error(error)
        self.error = error


# end of class Dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
