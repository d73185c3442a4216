""" The :class:`Method` is the unit of server-side logic that a
    :class:`mqrpc.Dispatcher` exposes to remote callers.
"""

import logging
import re

import jsonschema
from jsonschema.exceptions import best_match

from . import json
from . import weakref

logger = logging.getLogger(__name__)


class MethodError(Exception):
    """ A request could not be satisfied by the handler. The text of the
        exception is returned to the caller as the error_text of the reply.
    """


class Method:
    """ A :class:`Method` pairs a *name* with a *callback*. The name is the
        bare name the method was created with; when the method is registered
        with a :class:`mqrpc.Dispatcher` the name is rewritten to the fully
        qualified form ``<topic>.<name>``, where the topic is the
        dispatcher's topic unless *topic* is specified here. The
        *description* is returned by :func:`help`; if *is_default* is True
        this method handles requests that do not name a method.

        The callback is invoked as ``callback(method, params, state)``, where
        *method* is this :class:`Method` instance, *params* is the dictionary
        of validated input parameters, and *state* is the dispatcher-wide
        shared state. The return value of the callback is the result sent
        back to the caller. A callback can signal failure by raising
        :class:`MethodError`, or by calling :func:`set_error` and returning
        None.

        Input parameters are declared with :func:`add_input_parameter`; an
        optional JSON schema for the entire parameter object can be attached
        with :func:`set_schema_validator`.
    """

    def __init__(self, name, callback, description=None, topic=None, is_default=False):

        if callback is None or not callable(callback):
            raise TypeError('callback for method %r must be callable' % (name))

        self.name = name
        self.bare_name = name
        self.callback = callback
        self.description = description
        self.topic = topic
        self.is_default = bool(is_default)
        self.input_params = dict()
        self.schema = None
        self.error = None

        self._dispatcher = None
        self._validator = None


    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.name)


    def get_name(self):
        return self.name


    def update_name(self, name):
        """ Replace the name of this method with the fully qualified *name*.
            The bare name originally supplied is retained as :attr:`bare_name`.
        """

        self.name = name


    def add_input_parameter(self, name, description=None, pattern=None, required=False, default=None):
        """ Declare an input parameter. If a *pattern* is specified it is a
            regular expression that the string form of the value must match;
            as with :func:`re.search`, the pattern should be anchored if the
            whole value is to be matched. A *required* parameter that is not
            present in a request is an error; otherwise, the *default* value
            is filled in when the parameter is absent.
        """

        if not name:
            raise ValueError('input parameters must have a name')

        if pattern is not None:
            compiled = re.compile(pattern)
        else:
            compiled = None

        parameter = dict()
        parameter['description'] = description
        parameter['pattern'] = pattern
        parameter['required'] = bool(required)
        parameter['default'] = default
        parameter['_compiled'] = compiled

        self.input_params[name] = parameter


    def set_schema_validator(self, schema):
        """ Validate the entire parameter object of each request against the
            JSON *schema* (draft 7). A schema that is not itself valid raises
            :class:`jsonschema.exceptions.SchemaError` here, rather than at
            request time.
        """

        jsonschema.Draft7Validator.check_schema(schema)
        self.schema = schema
        self._validator = jsonschema.Draft7Validator(schema)


    def set_dispatcher(self, dispatcher):
        """ Record the owning *dispatcher*; None clears the back reference.
        """

        if dispatcher is None:
            self._dispatcher = None
        else:
            self._dispatcher = weakref.ref(dispatcher)


    def get_dispatcher(self):
        return weakref.deref(self._dispatcher, 'dispatcher for ' + str(self.name))


    def set_error(self, error):
        self.error = error


    def get_error(self):
        return self.error


    def help(self):
        """ Return a description of this method suitable for a remote caller.
        """

        input_params = dict()

        for name, parameter in self.input_params.items():
            described = dict()
            for key, value in parameter.items():
                if key[0] == '_':
                    continue
                described[key] = value
            input_params[name] = described

        description = dict()
        description['name'] = self.name
        description['description'] = self.description
        description['input_params'] = input_params
        description['schema'] = self.schema

        return description


    def handle_request(self, envelope, state=None, validators=()):
        """ Decode and validate the payload of the inbound *envelope*, then
            invoke the callback with the resulting parameters and the shared
            *state*. The *validators* are the dispatcher-wide default input
            validators, each one a callable invoked as ``validator(name,
            value)`` for every parameter; a false return value rejects the
            request.

            The callback result is returned; any failure is raised as a
            :class:`MethodError`.
        """

        self.error = None

        params = self.parse(envelope.payload, validators)
        logger.debug('invoking %s with %d parameters', self.name, len(params))
        results = self.callback(self, params, state)

        if results is None and self.error is not None:
            raise MethodError(self.error)

        return results


    def parse(self, payload, validators=()):
        """ Return the dictionary of parameters for a raw request *payload*.
        """

        if payload is None or payload == b'' or payload == '':
            params = dict()
        else:
            try:
                params = json.loads(payload)
            except ValueError as e:
                raise MethodError('unable to decode request payload: ' + str(e))

        if not isinstance(params, dict):
            raise MethodError('request payload must be a JSON object')

        if self._validator is not None:
            failure = best_match(self._validator.iter_errors(params))
            if failure is not None:
                raise MethodError('input validation failed: ' + failure.message)

        for name, parameter in self.input_params.items():
            try:
                value = params[name]
            except KeyError:
                if parameter['required']:
                    raise MethodError('missing required input parameter: ' + name)
                if parameter['default'] is not None:
                    params[name] = parameter['default']
                continue

            compiled = parameter['_compiled']
            if compiled is None:
                continue

            if value is None or compiled.search(str(value)) is None:
                raise MethodError("input parameter %s does not match pattern '%s'" % (name, parameter['pattern']))

        for validator in validators:
            for name, value in params.items():
                if not validator(name, value):
                    raise MethodError('input parameter %s rejected by validator %s' % (name, getattr(validator, '__name__', repr(validator))))

        return params


# end of class Method


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
