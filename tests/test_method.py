import jsonschema
import mqrpc
import pytest


def test_basics(add_method):

    assert add_method.name == 'add'
    assert add_method.get_name() == 'add'
    assert add_method.bare_name == 'add'
    assert add_method.topic is None
    assert add_method.is_default == False

    add_method.update_name('calc.add')
    assert add_method.name == 'calc.add'
    assert add_method.bare_name == 'add'


def test_callback_required():

    with pytest.raises(TypeError):
        mqrpc.Method('broken', None)


def test_handle_request(add_method, envelope):

    request = envelope('calc.add', {'a': 2, 'b': 3})
    assert add_method.handle_request(request) == {'result': 5}


def test_state_passed_through(envelope):

    def count(method, params, state):
        state['calls'] += 1
        return state['calls']

    method = mqrpc.Method('count', count)
    state = {'calls': 0}

    assert method.handle_request(envelope('calc.count'), state) == 1
    assert method.handle_request(envelope('calc.count'), state) == 2
    assert state['calls'] == 2


def test_missing_parameter(add_method, envelope):

    with pytest.raises(mqrpc.MethodError) as error:
        add_method.handle_request(envelope('calc.add', {'a': 2}))

    assert 'missing required input parameter: b' in str(error.value)


def test_pattern_mismatch(add_method, envelope):

    with pytest.raises(mqrpc.MethodError) as error:
        add_method.handle_request(envelope('calc.add', {'a': 2, 'b': 'three'}))

    assert 'input parameter b' in str(error.value)


def test_default_value(envelope):

    method = mqrpc.Method('echo', lambda method, params, state: params)
    method.add_input_parameter('greeting', default='hello')

    assert method.handle_request(envelope('calc.echo')) == {'greeting': 'hello'}
    assert method.handle_request(envelope('calc.echo', {'greeting': 'hi'})) == {'greeting': 'hi'}


def test_bad_payload(add_method, envelope):

    with pytest.raises(mqrpc.MethodError):
        add_method.handle_request(envelope('calc.add', b'{not json'))

    with pytest.raises(mqrpc.MethodError):
        add_method.handle_request(envelope('calc.add', [1, 2]))


def test_schema(envelope):

    method = mqrpc.Method('greet', lambda method, params, state: 'hello ' + params['who'])

    schema = dict()
    schema['type'] = 'object'
    schema['properties'] = {'who': {'type': 'string'}}
    schema['required'] = ['who']
    method.set_schema_validator(schema)

    assert method.handle_request(envelope('calc.greet', {'who': 'world'})) == 'hello world'

    with pytest.raises(mqrpc.MethodError) as error:
        method.handle_request(envelope('calc.greet', {'who': 5}))

    assert 'input validation failed' in str(error.value)

    with pytest.raises(jsonschema.exceptions.SchemaError):
        method.set_schema_validator({'type': 'no-such-type'})


def test_validators(add_method, envelope):

    def no_negatives(name, value):
        return int(value) >= 0

    request = envelope('calc.add', {'a': 2, 'b': 3})
    assert add_method.handle_request(request, None, (no_negatives,)) == {'result': 5}

    request = envelope('calc.add', {'a': -2, 'b': 3})

    with pytest.raises(mqrpc.MethodError) as error:
        add_method.handle_request(request, None, (no_negatives,))

    assert 'no_negatives' in str(error.value)


def test_set_error(envelope):

    def refuse(method, params, state):
        method.set_error('not today')
        return None

    method = mqrpc.Method('refuse', refuse)

    with pytest.raises(mqrpc.MethodError) as error:
        method.handle_request(envelope('calc.refuse'))

    assert str(error.value) == 'not today'
    assert method.get_error() == 'not today'


def test_help(add_method):

    add_method.update_name('calc.add')
    described = add_method.help()

    assert described['name'] == 'calc.add'
    assert described['description'] == 'Add numbers a and b together'
    assert described['schema'] is None
    assert sorted(described['input_params'].keys()) == ['a', 'b']

    a = described['input_params']['a']
    assert a['pattern'] == '^(-?[0-9]+)$'
    assert a['required'] == True
    assert '_compiled' not in a

    # The description has to be something we can put on the wire.
    mqrpc.json.dumps(described)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
