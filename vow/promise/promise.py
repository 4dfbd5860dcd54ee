# -*- coding: utf-8 -*-

import logging
from functools import partial
from ..common import config
from . import scheduler
from .errors import PendingError, RejectionError
from .util import is_thenable

_logger = logging.getLogger(__name__)


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise is used for asynchronous computation. It contains a value not yet
    known when the Promise is created. It allows to set callbacks who will be
    called as soon as the result is known. It's a "promise" of a future value.

    The producer of the value settles the Promise exactly once, by calling
    `resolve()` or `reject()`. The consumers chain callbacks with `next()`,
    each call returning a new Promise representing the callback's outcome.

    Promises are designed for a single thread of control: the asynchronous
    operations call `resolve()` or `reject()` from the same thread as the
    consumers. None of the methods are thread-safe.
    """

    PENDING = 'pending'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'

    def __init__(self, executor=None, _name=None, _previous=None):
        """Constructor of the Promise.

        Without argument, the Promise is pending until someone calls
        `resolve()` or `reject()`.

        If an executor is given, it's called with the two settlement methods
        of the new Promise, before the constructor returns. If the executor
        raises an exception, it's caught and the Promise is rejected with
        this exception.

        Args:
            executor (callable, optional): Takes 2 callable arguments:
                The first one should be called when the Promise is resolved
                (ie the task is done) and must accept the result's value as
                its only argument.
                The second should be called when an error occurs, with the
                rejection reason as argument.
            _name (str): if set, name used when converted to text.
        """
        self._state = self.PENDING
        self._value = None
        self._callbacks = []

        # Set when the Promise follows the state of another thenable.
        self._adopting = False

        if _name is None:
            _name = getattr(executor, '__name__', 'DEFERRED')
        self._name = _name
        self._previous = _previous

        if executor is not None:
            try:
                executor(self.resolve, self.reject)
            except Exception as error:
                self.reject(error)

    @property
    def state(self):
        """str: one of PENDING, RESOLVED or REJECTED."""
        return self._state

    @property
    def value(self):
        """The result value or the rejection reason. None while pending."""
        return self._value

    @property
    def is_pending(self):
        return self._state == self.PENDING

    @property
    def is_resolved(self):
        return self._state == self.RESOLVED

    @property
    def is_rejected(self):
        return self._state == self.REJECTED

    def resolve(self, value):
        """Fulfill the Promise with a value.

        If the value is itself a Promise (or any thenable), the Promise is not
        settled yet: it will follow the state of this thenable and settle with
        the same value or reason.

        Only the first call to `resolve()` or `reject()` has an effect. The
        next calls are ignored.

        Args:
            value: the result of the operation.
        """
        if self._state != self.PENDING or self._adopting:
            self._ignore_settlement(value)
            return
        self._resolve(value)

    def reject(self, reason):
        """Set the Promise in error.

        Unlike `resolve()`, the reason is kept as is, even if it's a thenable.
        Only the first call to `resolve()` or `reject()` has an effect.

        Args:
            reason: cause of the failure. It's usually an Exception, but any
                value is accepted.
        """
        if self._state != self.PENDING or self._adopting:
            self._ignore_settlement(reason)
            return
        self._settle(self.REJECTED, reason)

    def _ignore_settlement(self, value):
        if config.get('log_ignored_settlements'):
            _logger.warning('Try to settle Promise %s already settled. New '
                            'value will be ignored: %r', self, value)

    def _resolve(self, value):
        if value is self:
            self._settle(self.REJECTED,
                         TypeError('A Promise cannot be resolved with itself'))
        elif is_thenable(value):
            self._adopt(value)
        else:
            self._settle(self.RESOLVED, value)

    def _adopt(self, thenable):
        """Follow the state of `thenable` until it's settled."""
        self._adopting = True
        is_done = [False]

        def on_resolved(value):
            if is_done[0]:
                return
            is_done[0] = True
            # The value of a foreign thenable may be a thenable too.
            self._resolve(value)

        def on_rejected(reason):
            if is_done[0]:
                return
            is_done[0] = True
            self._settle(self.REJECTED, reason)

        try:
            thenable.next(on_resolved, on_rejected)
        except Exception as error:
            on_rejected(error)

    def _settle(self, state, value):
        if self._state != self.PENDING:
            return
        self._state = state
        self._value = value

        callbacks = self._callbacks
        # Free the references
        self._callbacks = None

        for on_resolved, on_rejected in callbacks:
            if state == self.RESOLVED:
                scheduler.run(on_resolved, value)
            else:
                scheduler.run(on_rejected, value)

    def next(self, on_resolved=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        If the promise is resolved, the `on_resolved` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can return:
        - A value: the new promise will be resolved with this value.
        - Another Promise, or any object with a `next` method: when resolved
            or rejected, will transfer its status (state and value/reason) to
            the Promise returned by this method.

        If a callback is not defined, the state of the "self" promise is
        transferred to the new promise (the state and the value/reason).

        Callbacks are called in the order they have been registered. If the
        Promise is already settled, the callback is called immediately.

        Args:
            on_resolved (callable, optional): This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                reason of the original promise's rejection as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """
        if not on_rejected:
            name = '%s' % getattr(on_resolved, '__name__', '???')
        elif not on_resolved:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_resolved, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))
        derived = Promise(_name=name, _previous=self)

        callback = partial(self._exec_callback, on_resolved, derived,
                           derived.resolve)
        errback = partial(self._exec_callback, on_rejected, derived,
                          derived.reject)

        if self._state == self.PENDING:
            self._callbacks.append((callback, errback))
        elif self._state == self.RESOLVED:
            scheduler.run(callback, self._value)
        else:
            scheduler.run(errback, self._value)
        return derived

    then = next

    @staticmethod
    def _exec_callback(callback, derived, passthrough, value):
        if callback is None:
            passthrough(value)
            return

        try:
            result = callback(value)
        except Exception as error:
            _logger.debug('Callback of %s raised %r', derived, error)
            derived.reject(error)
        else:
            derived.resolve(result)

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.next(None, on_rejected)`

        Args:
            on_rejected (callable): Will be called with the rejection reason
                if `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is resolved,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.next(None, on_rejected)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via next() or catch()), the
        default behavior is to do nothing, and thus, errors are silently
        ignored.
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(reason):
            if isinstance(reason, BaseException):
                _logger.error('[SAFEGUARD] %s' % self,
                              exc_info=(type(reason), reason,
                                        reason.__traceback__))
            else:
                _logger.error('[SAFEGUARD] %s rejected with %r'
                              % (self, reason))

        self.next(None, guard)

    def result(self):
        """Returns the result of a resolved Promise.

        This method never waits: the Promise must be settled.

        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            PendingError: if the promise is not settled yet.
            *: If the promise is rejected, the rejection cause is raised. A
                reason who is not an exception is wrapped in a
                RejectionError.
        """
        if self._state == self.PENDING:
            raise PendingError('%s is not settled' % self)
        elif self._state == self.REJECTED:
            if isinstance(self._value, BaseException):
                raise self._value
            raise RejectionError(self._value)
        return self._value

    def exception(self):
        """Returns the reason of a rejected Promise.

        Returns:
            *: the cause of the rejection of the Promise.
            None: if the promise is resolved.
        Raises:
            PendingError: if the promise is not settled yet.
        """
        if self._state == self.PENDING:
            raise PendingError('%s is not settled' % self)
        elif self._state == self.REJECTED:
            return self._value
        return None

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        if self._state == self.REJECTED:
            state = 'REJ'
        elif self._state == self.RESOLVED:
            state = 'RES'
        else:
            state = 'P'

        if self._previous:
            return '%s -> %s %s' % (self._previous._inner_print(), self._name,
                                    state)
        return '%s %s' % (self._name, state)

    @classmethod
    def resolved(cls, value):
        """Create a promise who resolves the selected value.

        Args:
            value: result of the promise. If it's a Promise, it's returned as
                is. Other thenables are followed.
        Returns:
            Promise: new Promise resolved, containing the value passed in
                parameter.
        """
        if isinstance(value, Promise):
            return value
        promise = cls(_name='RESOLVE')
        promise.resolve(value)
        return promise

    @classmethod
    def rejected(cls, reason):
        """Create a Promise rejected for the reason specified.

        Args:
            reason: rejection cause set to the Promise
        Returns:
            Promise: new Promise already rejected.
        """
        promise = cls(_name='REJECT')
        promise.reject(reason)
        return promise

    @classmethod
    def all(cls, promises):
        """Create a Promise who waits a list of promises to be all settled.

        The resulting Promise settles when all of the promises in the list are
        settled, keeping the order of the promise list. It never stops on the
        first error: all promises are awaited.
        If they are all resolved, the resulting Promise is resolved with the
        list of values.
        If at least one of them is rejected, the resulting Promise is rejected
        with the same list, where each rejected promise's slot contains its
        rejection reason.

        Values who are not thenable are considered as already resolved.

        Args:
            promises (list of Promise)
        Returns:
            Promise<list>: resulting promise, settled when all promises are
                settled.
        """
        promises = list(promises)
        if not promises:
            return cls.resolved([])

        parent = cls(_name='ALL')
        has_error = [False]
        remaining_tasks = [len(promises)]
        results = [None] * len(promises)

        def settle_one_promise(index, is_error, value):
            results[index] = value
            if is_error:
                has_error[0] = True
            remaining_tasks[0] -= 1
            if remaining_tasks[0] == 0:
                if has_error[0]:
                    parent.reject(results)
                else:
                    parent.resolve(results)

        for index, p in enumerate(promises):
            cls.resolved(p).next(partial(settle_one_promise, index, False),
                                 partial(settle_one_promise, index, True))
        return parent

    @classmethod
    def first(cls, promises):
        """Run all promises, then resolve or reject with the fastest Promise.

        The resulting Promise will be settled as soon as one of the promises
        is settled. Result value or rejection reason of the finished promise
        are transmitted. All other Promise results will be ignored.

        It can be used to set a timeout, by racing the Promise with another
        one rejected after a delay.

        Args:
            promises (list): list of promises to run at the same time.
        Returns:
            Promise: a promise
        Raises:
            ValueError: If the promise list is empty.
        """
        promises = list(promises)
        if not promises:
            raise ValueError('Empty promise list in Promise.first()')

        parent = cls(_name='FIRST')
        for p in promises:
            cls.resolved(p).next(parent.resolve, parent.reject)
        return parent

    @classmethod
    def map(cls, items, fn):
        """Apply an asynchronous function on each item, one after the other.

        `fn` is called on the first item. When the resulting Promise is
        resolved, `fn` is called on the second item, and so on. There is never
        more than one operation in progress.

        If a Promise is rejected (or if `fn` raises an exception), the
        resulting Promise is rejected with the same reason, and the remaining
        items are not processed.

        Args:
            items (iterable): items to process, in order.
            fn (callable): takes an item and returns a Promise (or a direct
                value).
        Returns:
            Promise<list>: resolved with the list of results, in the order of
                the items.
        """
        items = list(items)
        results = []
        parent = cls(_name='MAP %s' % getattr(fn, '__name__', '???'))

        def process_items(index):
            # Items settled synchronously are handled in this loop; a
            # callback is registered only on a pending Promise.
            while index < len(items):
                try:
                    p = cls.resolved(fn(items[index]))
                except Exception as error:
                    parent.reject(error)
                    return
                if p.is_pending:
                    p.next(partial(on_item_done, index), parent.reject)
                    return
                if p.is_rejected:
                    parent.reject(p.value)
                    return
                results.append(p.value)
                index += 1
            parent.resolve(results)

        def on_item_done(index, value):
            results.append(value)
            process_items(index + 1)

        process_items(0)
        return parent
