''' Wrapper module around :mod:`orjson` providing the equivalent of
    :func:`json.loads` and :func:`json.dumps`. Both directions operate on
    bytes, which is what the broker hands us and what it expects back.
'''

import orjson


# Request payloads and reply bodies are plain JSON; the only accommodation
# made here is to let dictionaries with non-string keys through, so that a
# handler returning {1: 'one'} does not turn into a failed reply.

_options = orjson.OPT_NON_STR_KEYS


def dumps(value):
    return orjson.dumps(value, option=_options)


loads = orjson.loads

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
