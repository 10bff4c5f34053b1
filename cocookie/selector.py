'''
Picks the cookies that go with an outgoing request, and serializes them.
'''

from collections import namedtuple

from . import record
from .errors import InvalidTarget
from .match import path_matches
from .urls import canonical_host, parse_target


class RequestContext(namedtuple('RequestContext', ['site_for_cookies', 'top_level', 'safe_method'])):
    '''
    What the jar can't know by itself about a request.

    site_for_cookies: url or hostname of the top-level document that caused
      the request, or None for a direct navigation (typed url, crawler seed).
    top_level: the request is a top-level navigation, not a subresource.
    safe_method: GET, HEAD, OPTIONS or TRACE.
    '''
    __slots__ = ()

    def __new__(cls, site_for_cookies=None, top_level=True, safe_method=True):
        return super().__new__(cls, site_for_cookies, top_level, safe_method)


DIRECT_NAVIGATION = RequestContext()

safe_methods = set(('GET', 'HEAD', 'OPTIONS', 'TRACE'))


def context_for_method(method, site_for_cookies=None, top_level=True):
    return RequestContext(site_for_cookies, top_level, method.upper() in safe_methods)


def site_host(site):
    # a url or a bare hostname
    if '://' in site:
        try:
            return parse_target(site).host
        except InvalidTarget:
            return ''
    return canonical_host(site)


def is_same_site(target, context, suffix_list):
    if context.site_for_cookies is None:
        return True
    site = site_host(context.site_for_cookies)
    if not site:
        return False
    return suffix_list.registrable_domain(site) == suffix_list.registrable_domain(target.host)


def same_site_allows(rec, same_site, context):
    if rec.same_site == record.NONE:
        return True
    if rec.same_site == record.STRICT:
        return same_site and context.top_level
    # Lax
    return same_site or (context.top_level and context.safe_method)


def specificity_order(rec):
    # longest path first; then oldest, so a server that reads only the first
    # of a repeated name sees the most specific cookie
    return (-len(rec.path), rec.creation_time, rec.seq)


def select(store, target, context, now):
    '''
    Returns the matching records in Cookie header order, and marks them
    as accessed. Access times are best-effort under concurrent readers.
    '''
    same_site = is_same_site(target, context, store.suffix_list)
    chosen = []
    for rec in store.all_for(target.host, now):
        if rec.secure and not target.secure:
            continue
        if not path_matches(rec.path, target.path):
            continue
        if not same_site_allows(rec, same_site, context):
            continue
        chosen.append(rec)

    chosen.sort(key=specificity_order)
    for rec in chosen:
        rec.last_access_time = now
    return chosen


def cookies_for_request(store, target, context, now):
    return [(rec.name, rec.value) for rec in select(store, target, context, now)]


def serialize(pairs):
    return '; '.join('{}={}'.format(name, value) for name, value in pairs)
