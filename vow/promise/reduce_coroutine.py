# -*- coding: utf-8 -*-

from functools import partial, wraps
import inspect
from .errors import RejectionError
from .promise import Promise
from .util import is_thenable


def reduce_coroutine(safeguard=False):
    """Decorator who converts a coroutine of promises into a single promise.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous Promises.
    Whatever is the number of Promises or async calls used, the result will
    always be an unique Promise wrapping the whole process.

    Each yielded Promise is awaited: its value is sent back to the generator,
    and its rejection reason is raised at the `yield` expression (wrapped in a
    RejectionError if it's not an exception).
    The result of the coroutine is, in order of priority, the value passed to
    `return`, the first non-thenable value yielded, or the value of the last
    Promise yielded.

    Args:
        safeguard (boolean): if true, use `Promise.safeguard()` on the
            resulting promise.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                Promise<*>
            """
            promise = Promise(_name='COROUTINE %s' % func.__name__)
            if safeguard:
                promise.safeguard()

            try:
                # Create generator; Initialization phase
                gen = func(*args, **kwargs)
            except Exception as error:
                promise.reject(error)
                return promise

            if not inspect.isgenerator(gen):
                promise.resolve(gen)
                return promise

            def _close(value):
                try:
                    gen.close()
                except RuntimeError as error:
                    # The generator yielded again instead of closing.
                    return promise.reject(error)
                promise.resolve(value)

            def _stop(stop, last_value):
                if stop.value is not None:
                    promise.resolve(stop.value)
                else:
                    promise.resolve(last_value)

            def _step(is_error, value):
                # Resume the generator until it waits for a pending Promise.
                # Promises already settled are handled in the loop.
                while True:
                    if is_error:
                        last_value = None
                        if isinstance(value, BaseException):
                            error = value
                        else:
                            error = RejectionError(value)
                    else:
                        last_value = value

                    try:
                        if is_error:
                            yielded = gen.throw(error)
                        else:
                            yielded = gen.send(value)
                    except StopIteration as stop:
                        return _stop(stop, last_value)
                    except Exception as raised:
                        if is_error and raised is error:
                            return promise.reject(value)
                        return promise.reject(raised)

                    if not is_thenable(yielded):
                        return _close(yielded)

                    p = Promise.resolved(yielded)
                    if p.is_pending:
                        p.next(partial(_step, False), partial(_step, True))
                        return
                    is_error, value = p.is_rejected, p.value

            # Start and resolve loop.
            _step(False, None)
            return promise

        return wrapper
    return decorator
