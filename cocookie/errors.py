'''
Exceptions and events raised or reported by the cookie jar.

Nothing in here is allowed to abort the caller's request/response cycle:
the jar catches RejectedCookie itself, and InvalidTarget is only surfaced
from header_for_request() so the caller can decide to send no cookies.
'''

from collections import namedtuple


class CookieError(Exception):
    pass


class RejectedCookie(CookieError):
    '''
    A Set-Cookie header value failed validation and produced no record.
    '''
    def __init__(self, reason, raw=None):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw

    def __str__(self):
        if self.raw is None:
            return self.reason
        return '{}: {!r}'.format(self.reason, self.raw[:100])


class InvalidTarget(CookieError, ValueError):
    '''
    A request or response url that can't carry cookies.
    '''
    def __init__(self, url, reason):
        super().__init__(reason)
        self.url = url
        self.reason = reason

    def __str__(self):
        return 'invalid target {!r}: {}'.format(str(self.url)[:100], self.reason)


# informational, never raised. scope is 'domain' or 'total'
CapacityEvicted = namedtuple('CapacityEvicted', ['record', 'scope'])
