# -*- coding: utf-8 -*-


class PromiseError(Exception):
    """Base class of the errors raised by the promise module itself."""
    pass


class PendingError(PromiseError):
    """The result of a Promise is requested while it's not settled yet."""
    pass


class RejectionError(PromiseError):
    """Raised in place of a rejection reason who is not an exception.

    Attributes:
        reason: the original rejection reason.
    """

    def __init__(self, reason):
        PromiseError.__init__(self, reason)
        self.reason = reason

    def __str__(self):
        return repr(self.reason)
