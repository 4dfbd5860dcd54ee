# -*- coding: utf-8 -*-
"""Execution of the callbacks fired by the settlement of a Promise.

By default, a callback is called as soon as it's fired. When a Promise is
settled, the callbacks of its chained promises are called from inside its own
callback, and so on: a long chain produces deep recursive calls. Past
`MAX_DEPTH` nested callbacks, new callbacks are put in a queue instead, and
executed once the stack is unwound.

When the config entry 'iterative_drain' is set, callbacks fired while another
callback is running are always put in the queue.

In both cases, the outermost call to `run()` empties the queue before
returning: when a producer calls `resolve()` or `reject()` outside of any
callback, all the chained callbacks have been executed when it returns. The
order of the callbacks of a same Promise is kept; only the nesting is
different.
However, a `resolve()` called from inside a callback may return before the
callbacks of its Promise are executed: they run after the current callback,
still before the outermost `run()` returns.

Like the promises, this module is not thread-safe.
"""

from collections import deque
import logging
from ..common import config

_logger = logging.getLogger(__name__)

# Maximum number of nested callbacks in recursive mode.
MAX_DEPTH = 50

_queue = deque()
_depth = [0]
_max_depth = [MAX_DEPTH]


def run(callback, value):
    """Execute `callback(value)`, now or at the end of the current callback.

    Args:
        callback (callable): a callback from a Promise's queue. It must not
            raise.
        value: the value or the reason to pass to the callback.
    """
    if _depth[0] == 0:
        # The mode is read once per outermost call.
        _max_depth[0] = 1 if config.get('iterative_drain') else MAX_DEPTH

    if _depth[0] >= _max_depth[0]:
        _queue.append((callback, value))
        return

    if _depth[0] > 0:
        _execute(callback, value)
        return

    try:
        _execute(callback, value)
        while _queue:
            callback, value = _queue.popleft()
            _execute(callback, value)
    finally:
        if _queue:
            _logger.warning('%s queued callback(s) dropped after an '
                            'interruption.' % len(_queue))
            _queue.clear()


def _execute(callback, value):
    _depth[0] += 1
    try:
        callback(value)
    finally:
        _depth[0] -= 1
