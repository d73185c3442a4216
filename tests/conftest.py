import mqrpc
import pytest


class FakeChannel(mqrpc.transport.Channel):
    """ In-memory stand-in for a broker channel. Messages queued with
        :func:`deliver` are handed to the consumer once start_consuming()
        is invoked, one at a time, in order.
    """

    def __init__(self, queue='calc-queue'):
        self.queue = queue
        self.bindings = list()
        self.published = list()
        self.acked = list()
        self.pending = list()
        self.on_message = None
        self.running = False
        self.closed = False
        self.fail_bind = False

    @property
    def is_open(self):
        return not self.closed

    def consume(self, on_message):
        self.on_message = on_message

    def bind_queue(self, queue, exchange, routing_key):
        if self.fail_bind:
            raise mqrpc.transport.TransportError('bind refused')
        self.bindings.append((queue, exchange, routing_key))

    def publish(self, exchange, routing_key, correlation_id, body):
        self.published.append((exchange, routing_key, correlation_id, body))

    def ack(self, delivery_tag):
        self.acked.append(delivery_tag)

    def deliver(self, envelope):
        self.pending.append(envelope)

    def start_consuming(self):
        self.running = True
        while self.running and self.pending:
            self.on_message(self.pending.pop(0))
        self.running = False

    def stop_consuming(self):
        self.running = False

    def close(self):
        self.closed = True

    def replies(self):
        return [mqrpc.json.loads(published[3]) for published in self.published]


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def connect(channel):
    """ A transport factory that records its arguments and hands back the
        in-memory channel.
    """

    def fake_connect(**kwargs):
        fake_connect.calls.append(kwargs)
        return channel

    fake_connect.calls = list()
    return fake_connect


@pytest.fixture
def dispatcher(connect):
    return mqrpc.Dispatcher('calc', exchange='OESS', connect=connect)


@pytest.fixture
def envelope():
    """ Factory for inbound request envelopes. """

    tags = iter(range(1, 1000))

    def make_envelope(routing_key, payload=None, reply_to='caller.reply', correlation_id='abc123', no_reply=None, exchange='OESS'):
        if payload is not None and not isinstance(payload, bytes):
            payload = mqrpc.json.dumps(payload)

        header = dict()
        header['no_reply'] = no_reply
        header['correlation_id'] = correlation_id
        header['reply_to'] = reply_to

        deliver = dict()
        deliver['exchange'] = exchange
        deliver['routing_key'] = routing_key
        deliver['queue'] = 'calc-queue'
        deliver['delivery_tag'] = next(tags)

        return mqrpc.protocol.Envelope(header, deliver, payload)

    return make_envelope


def do_add(method, params, state):
    return {'result': int(params['a']) + int(params['b'])}


@pytest.fixture
def add_method():
    method = mqrpc.Method('add', do_add, description='Add numbers a and b together')
    method.add_input_parameter('a', description='first addend', pattern='^(-?[0-9]+)$', required=True)
    method.add_input_parameter('b', description='second addend', pattern='^(-?[0-9]+)$', required=True)
    return method


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
