# -*- coding: utf-8 -*-

from .decorators import wrap_promise
from .errors import PendingError, PromiseError, RejectionError
from .promise import Promise
from .reduce_coroutine import reduce_coroutine
from .util import is_thenable

__all__ = ['is_thenable', 'PendingError', 'Promise', 'PromiseError',
           'RejectionError', 'reduce_coroutine', 'wrap_promise']
