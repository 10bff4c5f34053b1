'''
Request and response targets, as far as cookies care about them:
scheme, canonical hostname, and path.

Hostnames are lowercased, punycoded, and stripped of a trailing dot, the
same way for the host that sets a cookie and the host that asks for it.
'''

from collections import namedtuple
import logging

import yarl

from .errors import InvalidTarget

LOGGER = logging.getLogger(__name__)

cookie_schemes = set(('http', 'https', 'ws', 'wss'))
secure_schemes = set(('https', 'wss'))

Target = namedtuple('Target', ['url', 'scheme', 'host', 'path', 'secure'])


def canonical_host(host):
    host = host.strip().lower()
    if host.endswith('.'):
        host = host[:-1]
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    return host


def parse_target(url):
    '''
    Accepts a str or a yarl.URL. Raises InvalidTarget for anything that
    can't send or receive cookies.
    '''
    if isinstance(url, yarl.URL):
        u = url
    elif isinstance(url, str):
        try:
            u = yarl.URL(url)
        except (ValueError, TypeError) as e:
            raise InvalidTarget(url, 'unparseable url: {}'.format(e))
    else:
        raise InvalidTarget(url, 'not a url')

    try:
        scheme = (u.scheme or '').lower()
        raw_host = u.raw_host
        path = u.raw_path
    except ValueError as e:
        raise InvalidTarget(url, 'unparseable url: {}'.format(e))

    if scheme not in cookie_schemes:
        raise InvalidTarget(url, 'scheme {!r} does not carry cookies'.format(scheme))
    if not raw_host:
        raise InvalidTarget(url, 'no hostname')
    host = canonical_host(raw_host)
    if not host:
        raise InvalidTarget(url, 'no hostname')
    if not path or not path.startswith('/'):
        path = '/'

    return Target(str(u), scheme, host, path, scheme in secure_schemes)
