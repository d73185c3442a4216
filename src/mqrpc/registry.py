""" The :class:`MethodRegistry` maps fully qualified method names to
    :class:`mqrpc.Method` instances for a single dispatcher.
"""

import logging

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """ A method could not be registered.
    """


class InvalidMethodName(RegistrationError):
    pass


class DuplicateMethod(RegistrationError):
    pass


class MethodRegistry:
    """ Registered methods, keyed by their fully qualified name. Each name is
        ``<topic>.<bare name>``; the *topic* is the one supplied here, unless
        the method being registered carries its own. Names are unique: the
        first registration of a name is authoritative.

        At most one method is the default method, the one that handles
        requests that do not name a method. Registering another default
        method replaces the previous default.
    """

    def __init__(self, topic):

        self.topic = topic
        self.default = None
        self._methods = dict()


    def __contains__(self, name):
        return name in self._methods


    def __iter__(self):
        return iter(self.names())


    def __len__(self):
        return len(self._methods)


    def qualify(self, method):
        """ Return the fully qualified name *method* would be registered as.
        """

        bare_name = method.bare_name

        if bare_name is None or bare_name == '':
            raise InvalidMethodName(repr(method) + ' does not have a name')

        topic = method.topic
        if topic is None:
            topic = self.topic

        return topic + '.' + str(bare_name)


    def add(self, method):
        """ Register *method* under its fully qualified name, which is
            applied to the method via :func:`mqrpc.Method.update_name`.
            Returns the name. :class:`InvalidMethodName` is raised if the
            method has no name; :class:`DuplicateMethod` is raised if the name
            is already registered, in which case neither the registry nor the
            rejected method are modified.
        """

        name = self.qualify(method)

        if name in self._methods:
            raise DuplicateMethod(name + ' already exists')

        method.update_name(name)
        self._methods[name] = method

        if method.is_default:
            if self.default is not None and self.default != name:
                logger.info('default method changed from %s to %s', self.default, name)
            self.default = name

        return name


    def remove(self, name):

        method = self._methods.pop(name)

        if self.default == name:
            self.default = None

        return method


    def get(self, name):
        """ Return the method registered as *name*, or None.
        """

        return self._methods.get(name)


    def names(self):
        """ Return a sorted list of all registered names.
        """

        return sorted(self._methods.keys())


# end of class MethodRegistry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
