""" The built-in 'help' method, registered with every dispatcher.
"""

from .method import Method

name = 'help'

schema = dict()
schema['type'] = 'object'
schema['properties'] = {'method_name': {'type': 'string'}}


def help(method, params, state):
    """ Return the sorted list of registered methods; or, if the
        'method_name' parameter is provided, the description of that method.
    """

    method_name = params.get('method_name')
    dispatcher = method.get_dispatcher()

    if method_name is None:
        return dispatcher.get_method_list()

    described = dispatcher.get_method(method_name)

    if described is None:
        method.set_error('unknown method: ' + method_name)
        return None

    return described.help()


def help_method():
    """ Return a new :class:`mqrpc.Method` instance for the built-in help.
        It is the default method: requests that do not name a method get
        the list of registered methods.
    """

    method = Method(name, help, description='The help method!', is_default=True)
    method.set_schema_validator(schema)
    method.add_input_parameter('method_name', description='Name of the method to describe.')

    return method


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
