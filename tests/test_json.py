import json
import mqrpc


def test_json_encode_and_decode():
    encode_and_decode(json.dumps, json.loads, dump_is_bytes=False)


def test_mqrpc_encode_and_decode():
    encode_and_decode(mqrpc.json.dumps, mqrpc.json.loads)


def test_reply_body_is_compact_bytes():

    encoded = mqrpc.json.dumps({'error': 0, 'results': None})
    assert encoded == b'{"error":0,"results":null}'


def encode_and_decode(dumps, loads, dump_is_bytes=True):

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {1: 'one', 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = dumps(input_dictionary)

    if dump_is_bytes:
        assert isinstance(encoded, bytes)
    else:
        assert isinstance(encoded, str)

    decoded = loads(encoded)
    assert isinstance(decoded, dict)

    # JSON will not use bare integers as dictionary keys, they get translated
    # to strings upon encoding. The decoded dictionary cannot match the input
    # until that one nested key is put back.

    assert decoded != input_dictionary

    del decoded['dict']['1']
    decoded['dict'][1] = 'one'
    assert decoded == input_dictionary


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
