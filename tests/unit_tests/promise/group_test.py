# -*- coding: utf-8 -*-

import random
import pytest

from vow.promise import Promise
from .fake_loop import FakeLoop


class MyException(Exception):
    pass


class TestAllMethod(object):

    def test_method_all_with_empty_set(self):
        p = Promise.all([])
        assert p.result() == []

    def test_method_all_with_one_promise(self):
        p1 = Promise.resolved('RESULT')
        p = Promise.all([p1])
        assert p.result() == ['RESULT']

    def test_method_all_with_one_rejected_promise(self):
        reason = MyException()
        p1 = Promise.rejected(reason)
        p = Promise.all([p1])

        assert p.exception() == [reason]

    def test_method_all_with_several_promises(self):
        promises = [Promise.resolved(1) for _ in range(0, 20)]

        p = Promise.all(promises)

        assert sum(p.result()) == 20

    def test_method_all_with_rejected_promise(self):
        """The rejection reason is the list of all values and reasons."""
        reason = MyException()
        promises = [Promise.resolved(1) for _ in range(0, 5)]
        promises += [Promise.rejected(reason)]
        promises += [Promise.resolved(1) for _ in range(0, 5)]

        p = Promise.all(promises)
        assert p.exception() == [1] * 5 + [reason] + [1] * 5

    def test_method_all_with_async_promises(self):
        promises = [Promise.resolved(1) for _ in range(0, 5)]
        last = Promise()
        promises.append(last)

        p = Promise.all(promises)

        # The ALL promise is not yet resolved.
        assert p.is_pending

        last.resolve('OK')

        # Now, all sub-promises are resolved.
        assert p.result() == [1] * 5 + ['OK']

    def test_method_all_waits_after_rejection(self, drain_mode):
        """The parent is settled only when every member is settled."""
        loop = FakeLoop()
        reason = MyException()
        p1 = loop.resolve_later(20, 'one')
        p2 = loop.reject_later(5, reason)
        p3 = loop.resolve_later(10, 'three')
        p = Promise.all([p1, p2, p3])

        settled_at = []
        p.next(None, lambda __: settled_at.append(loop.now))
        loop.run()

        assert settled_at == [20]
        assert p.exception() == ['one', reason, 'three']

    def test_method_all_must_keep_order(self):
        promises = [Promise() for _ in range(0, 25)]

        # promises are ordered.
        p = Promise.all(promises)

        # Resolves the promises in a random order
        indexes = list(range(0, 25))
        random.shuffle(indexes)
        for i in indexes:
            promises[i].resolve(i)

        assert p.result() == list(range(0, 25))

    def test_method_all_with_values(self):
        """Values who are not promises are used as results."""
        p = Promise.all([1, Promise.resolved(2), 'three'])
        assert p.result() == [1, 2, 'three']

    def test_method_all_with_generator(self):
        p = Promise.all(Promise.resolved(i) for i in range(3))
        assert p.result() == [0, 1, 2]


class TestFirstMethod(object):

    def test_method_first_with_empty_set(self):
        with pytest.raises(ValueError):
            Promise.first([])

    def test_method_first_with_one_promise(self):
        p1 = Promise.resolved('RESULT')
        p = Promise.first([p1])
        assert p.result() == 'RESULT'

    def test_method_first_with_several_promises(self):
        # Add non-resolving promises.
        promises = [Promise() for _ in range(0, 5)]

        async_promises = [Promise(), Promise()]
        promises += async_promises

        # Add non-resolving promises.
        promises += [Promise() for _ in range(0, 5)]

        p = Promise.first(promises)

        assert p.is_pending
        async_promises[1].resolve('RESULT')

        # p is resolved after the first Promise resolves.
        assert p.result() == 'RESULT'

        # subsequent Promises resolutions should have no effect.
        async_promises[0].resolve('RESULT2')
        assert p.result() == 'RESULT'
        assert async_promises[0].result() == 'RESULT2'

    def test_method_first_with_failing_promises(self):
        promises = [Promise() for _ in range(0, 15)]

        p = Promise.first(promises)

        assert p.is_pending

        random.shuffle(promises)
        promises.pop(0).reject(MyException())
        assert isinstance(p.exception(), MyException)

        # subsequent rejection are ignored
        for member in promises:
            member.reject(ValueError())

        assert isinstance(p.exception(), MyException)

    def test_method_first_rejection_before_resolution(self, drain_mode):
        loop = FakeLoop()
        reason = MyException()
        p1 = loop.resolve_later(10, 'too late')
        p2 = loop.reject_later(5, reason)

        p = Promise.first([p1, p2])
        loop.run()

        assert p.exception() is reason
        assert p1.result() == 'too late'

    def test_method_first_as_timeout(self):
        """Race an operation with a Promise rejected after a delay."""
        loop = FakeLoop()
        operation = loop.resolve_later(100, 'data')
        timeout = loop.reject_later(30, MyException('timeout'))

        p = Promise.first([operation, timeout])
        loop.run()
        assert str(p.exception()) == 'timeout'


class TestMapMethod(object):

    def test_map_is_sequential(self, drain_mode):
        """Each item is processed after the previous one is resolved."""
        loop = FakeLoop()
        log = []

        def fn(item):
            log.append(('call', item, loop.now))
            p = loop.resolve_later(10, item.upper())
            p.next(lambda value: log.append(('done', value, loop.now)))
            return p

        p = Promise.map(['a', 'b', 'c'], fn)
        assert log == [('call', 'a', 0)]

        loop.run()
        assert log == [
            ('call', 'a', 0), ('done', 'A', 10),
            ('call', 'b', 10), ('done', 'B', 20),
            ('call', 'c', 20), ('done', 'C', 30)
        ]
        assert p.result() == ['A', 'B', 'C']

    def test_map_stops_on_rejection(self, drain_mode):
        loop = FakeLoop()
        reason = MyException()
        calls = []

        def fn(item):
            calls.append(item)
            if item == 'b':
                return loop.reject_later(10, reason)
            return loop.resolve_later(10, item.upper())

        p = Promise.map(['a', 'b', 'c'], fn)
        loop.run()

        assert calls == ['a', 'b']
        assert p.exception() is reason

    def test_map_with_empty_list(self):
        calls = []
        p = Promise.map([], calls.append)
        assert p.result() == []
        assert not calls

    def test_map_with_raising_function(self):
        calls = []

        def fn(item):
            calls.append(item)
            if item == 2:
                raise MyException()
            return Promise.resolved(item)

        p = Promise.map([1, 2, 3], fn)
        assert isinstance(p.exception(), MyException)
        assert calls == [1, 2]

    def test_map_with_direct_values(self):
        p = Promise.map([1, 2, 3], lambda x: x * 10)
        assert p.result() == [10, 20, 30]

    def test_map_with_many_resolved_promises(self, drain_mode):
        """The stack doesn't grow with the number of items."""
        p = Promise.map(list(range(1000)), Promise.resolved)
        assert p.result() == list(range(1000))

    def test_map_with_many_direct_values(self, drain_mode):
        p = Promise.map(list(range(1000)), lambda x: x + 1)
        assert p.result() == list(range(1, 1001))

    def test_map_with_many_items_mixed(self, drain_mode):
        """Pending and already resolved promises alternate."""
        loop = FakeLoop()

        def fn(item):
            if item % 100 == 0:
                return loop.resolve_later(1, item)
            return Promise.resolved(item)

        p = Promise.map(list(range(1000)), fn)
        loop.run()
        assert p.result() == list(range(1000))
