'''
Domain and path matching, RFC 6265 sections 5.1.3 and 5.1.4.

These are pure functions. Hostnames arrive already lowercased and
punycoded (see urls.canonical_host), so comparisons are plain string
comparisons.
'''

import ipaddress


def is_ip_address(host):
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def domain_matches(cookie_domain, host_only, request_host):
    '''
    A host-only cookie only goes back to the exact host that set it.
    A domain cookie also goes to subdomains, split on a label boundary:
    evilexample.com is not a subdomain of example.com.
    '''
    if request_host == cookie_domain:
        return True
    if host_only or not cookie_domain:
        return False
    if not request_host.endswith('.' + cookie_domain):
        return False
    return not is_ip_address(request_host)


def path_matches(cookie_path, request_path):
    if cookie_path == request_path:
        return True
    if not request_path.startswith(cookie_path):
        return False
    if cookie_path.endswith('/'):
        return True
    return request_path[len(cookie_path)] == '/'


def default_path(request_path):
    '''
    The "directory" of the request path: /a/b/c -> /a/b, /a -> /
    '''
    if not request_path or not request_path.startswith('/'):
        return '/'
    right = request_path.rfind('/')
    if right == 0:
        return '/'
    return request_path[:right]
