# -*- coding: utf-8 -*-


def is_thenable(value):
    """Check if an object can be chained, like a Promise, or is a "result".

    The promise module uses this function to differentiate "chainable" objects
    and direct values, when resolving a Promise or when a callback can return
    both. Any object with a `next(on_resolved, on_rejected)` method is
    accepted, not only Promise instances.

    Returns:
        boolean: True if the value has an attribute 'next' who is callable.
            False if not.
    """
    return hasattr(getattr(value, 'next', None), '__call__')
