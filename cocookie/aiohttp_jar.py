'''
Lets an aiohttp ClientSession keep its cookies in a CookieJar:

    jar = AiohttpCookieJar(CookieJar.from_config())
    session = aiohttp.ClientSession(cookie_jar=jar)

aiohttp has no idea whether a request is a navigation or a subresource, so
every request is treated as the context given to the constructor, by
default a direct top-level navigation (which is what a crawler does).

aiohttp keeps request cookies in a dict keyed by name, so when two cookies
share a name only the first, most specific one is sent.

Cookies given to ClientSession(cookies=...) have no response url, and the
jar won't store cookies that aren't tied to a host; they are logged and
dropped.
'''

from collections.abc import Mapping
import email.utils
from http.cookies import CookieError, Morsel, SimpleCookie
import logging

import aiohttp.abc
from yarl import URL

from . import selector
from . import stats
from .cookies import CookieJar
from .errors import InvalidTarget

LOGGER = logging.getLogger(__name__)


def to_morsel(rec):
    mrsl = Morsel()
    try:
        mrsl.set(rec.name, rec.value, rec.value)
    except CookieError:
        # legal in a Set-Cookie, but not to http.cookies
        return None
    mrsl['domain'] = rec.domain
    mrsl['path'] = rec.path
    if rec.secure:
        mrsl['secure'] = True
    if rec.http_only:
        mrsl['httponly'] = True
    mrsl['samesite'] = rec.same_site
    if rec.expiry is not None:
        mrsl['expires'] = email.utils.formatdate(rec.expiry, usegmt=True)
    return mrsl


class AiohttpCookieJar(aiohttp.abc.AbstractCookieJar):
    def __init__(self, jar=None, context=None, *, loop=None):
        super().__init__(loop=loop)
        self.jar = jar if jar is not None else CookieJar()
        self.context = context or selector.DIRECT_NAVIGATION

    @property
    def quote_cookie(self):
        return True

    @property
    def unsafe(self):
        # cookies from IP address hosts are kept
        return True

    @property
    def cookies(self):
        '''
        Every cookie in the jar as a SimpleCookie. Names repeat across
        domains and paths, so only the first record for a name is here.
        '''
        cookies = SimpleCookie()
        for mrsl in self:
            if mrsl.key not in cookies:
                dict.__setitem__(cookies, mrsl.key, mrsl)
        return cookies

    @property
    def host_only_cookies(self):
        return set((rec.domain, rec.name) for rec in self.jar if rec.host_only)

    def __iter__(self):
        for rec in self.jar:
            mrsl = to_morsel(rec)
            if mrsl is not None:
                yield mrsl

    def __len__(self):
        return len(self.jar)

    def clear(self, predicate=None):
        if predicate is None:
            self.jar.clear()
            return

        def morsel_predicate(rec):
            mrsl = to_morsel(rec)
            return mrsl is not None and predicate(mrsl)

        self.jar.clear(morsel_predicate)

    def clear_domain(self, domain):
        self.jar.clear_domain(domain)

    def update_cookies(self, cookies, response_url=URL()):
        if isinstance(cookies, Mapping):
            cookies = cookies.items()
        headers = []
        for name, value in cookies:
            if isinstance(value, Morsel):
                headers.append(value.OutputString())
            else:
                headers.append('{}={}'.format(name, value))
        self.jar.apply_response(response_url, headers)

    def update_cookies_from_headers(self, headers, response_url):
        self.jar.apply_response(response_url, list(headers))

    def filter_cookies(self, request_url):
        filtered = SimpleCookie()
        try:
            pairs = self.jar.cookies_for_request(request_url, self.context)
        except InvalidTarget as e:
            LOGGER.debug('no cookies for %s', e)
            return filtered

        for name, value in pairs:
            if name in filtered:
                continue
            mrsl = Morsel()
            try:
                mrsl.set(name, value, value)
            except CookieError:
                LOGGER.debug('cookie %s has a name aiohttp cannot send', name)
                stats.stats_sum('cookies unsendable by aiohttp', 1)
                continue
            dict.__setitem__(filtered, name, mrsl)
        return filtered
