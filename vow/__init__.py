# -*- coding: utf-8 -*-
"""Promises for single-threaded, callback-driven code.

Example::

    from vow import Promise

    def download(url):
        p = Promise()
        http_client.fetch(url, callback=p.resolve, errback=p.reject)
        return p

    download(url).next(parse).next(store, log_error)
"""

from .__version__ import __version__  # noqa

from .promise import (is_thenable, PendingError, Promise, PromiseError,
                      RejectionError, reduce_coroutine, wrap_promise)

__all__ = ['is_thenable', 'PendingError', 'Promise', 'PromiseError',
           'RejectionError', 'reduce_coroutine', 'wrap_promise']
