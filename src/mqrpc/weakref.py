''' Weak reference helpers. A registered :class:`mqrpc.Method` refers back
    to the :class:`mqrpc.Dispatcher` that owns it; that back reference must
    not keep the dispatcher alive.
'''

import weakref


def ref(thing):
    """ Return a weak reference to the supplied argument, regardless of
        whether it is a simple object or a bound method.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)


def deref(reference, description='referenced object'):
    """ Dereference *reference*, as returned by :func:`ref`. None is returned
        if there was never a reference to begin with; a :class:`ReferenceError`
        is raised if the referenced object has since been deallocated.
    """

    if reference is None:
        return None

    thing = reference()

    if thing is None:
        raise ReferenceError(description + ' no longer exists')

    return thing


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
