""" A dispatcher offering two methods on the 'calc' topic. Run against a
    local broker; a client publishes to the 'OESS' exchange with a routing
    key of 'calc.plus' and a payload such as {"a": 2, "b": 3}.
"""

import logging
import mqrpc


def do_plus(method, params, state):
    return {'result': int(params['a']) + int(params['b'])}


def do_shutdown(method, params, state):
    method.get_dispatcher().stop_consuming()
    return {'stopping': True}


def main():

    mqrpc.log.setup(logging.DEBUG)

    dispatcher = mqrpc.Dispatcher('calc',
                                  queue='OF-FWDCTL',
                                  exchange='OESS',
                                  user='guest',
                                  password='guest')

    method = mqrpc.Method('plus', do_plus, description='Add numbers a and b together')
    method.set_schema_validator({'type': 'object'})
    method.add_input_parameter('a', description='first addend', pattern='^(-?[0-9]+)$', required=True)
    method.add_input_parameter('b', description='second addend', pattern='^(-?[0-9]+)$', required=True)
    dispatcher.register_method(method)

    method = mqrpc.Method('shutdown', do_shutdown, description='Stop handling requests')
    dispatcher.register_method(method)

    # This blocks until the shutdown method is invoked.
    dispatcher.start_consuming()
    dispatcher.close()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
