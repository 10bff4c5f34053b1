'''
An HTTP cookie jar for clients and crawlers.
'''

from .cookies import CookieJar
from .errors import CapacityEvicted, InvalidTarget, RejectedCookie
from .psl import FixedSuffixList, PublicSuffixList
from .record import CookieRecord
from .selector import RequestContext

__all__ = ['CookieJar', 'CookieRecord', 'RequestContext', 'PublicSuffixList', 'FixedSuffixList',
           'RejectedCookie', 'InvalidTarget', 'CapacityEvicted']
