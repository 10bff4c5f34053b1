'''
Set-Cookie parsing, RFC 6265 section 5.2, plus the parts of 6265bis that
current browsers ship: SameSite, cookie name prefixes, and no Secure
cookies from insecure origins.

parse_set_cookie() either returns a CookieRecord or raises RejectedCookie.
A malformed Expires or Max-Age is not a rejection, the attribute is just
ignored. Storing the record is the caller's job.
'''

import calendar
import logging
import re

from . import record
from .errors import RejectedCookie
from .match import default_path, domain_matches, is_ip_address

LOGGER = logging.getLogger(__name__)

max_name_value_size = 4096
max_attribute_size = 1024

# Max-Age <= 0 means "expire now"
EARLIEST = 0.0

# horizontal tab is allowed
CTL_RE = re.compile(r'[\x00-\x08\x0a-\x1f\x7f]')
MAX_AGE_RE = re.compile(r'-?[0-9]+$')

# RFC 6265 5.1.1
DATE_TOKENS_RE = re.compile(r'[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]*'
                            r'(?P<token>[\x00-\x08\x0A-\x1F\d:a-zA-Z\x7F-\xFF]+)')
DATE_HMS_TIME_RE = re.compile(r'(\d{1,2}):(\d{1,2}):(\d{1,2})(?:\D|$)')
DATE_DAY_OF_MONTH_RE = re.compile(r'(\d{1,2})(?:\D|$)')
DATE_MONTH_RE = re.compile('(jan)|(feb)|(mar)|(apr)|(may)|(jun)|(jul)|'
                           '(aug)|(sep)|(oct)|(nov)|(dec)', re.I)
DATE_YEAR_RE = re.compile(r'(\d{2,4})(?:\D|$)')


def parse_date(date_str):
    '''
    Returns a POSIX timestamp, or None if the date is unusable.
    Browsers are very forgiving about cookie dates, so this is too.
    '''
    if not date_str:
        return None

    found_time = found_day = found_month = found_year = False
    hour = minute = second = 0
    day = month = year = 0

    for token_match in DATE_TOKENS_RE.finditer(date_str):
        token = token_match.group('token')

        if not found_time:
            time_match = DATE_HMS_TIME_RE.match(token)
            if time_match:
                found_time = True
                hour, minute, second = [int(s) for s in time_match.groups()]
                continue

        if not found_day:
            day_match = DATE_DAY_OF_MONTH_RE.match(token)
            if day_match:
                found_day = True
                day = int(day_match.group(1))
                continue

        if not found_month:
            month_match = DATE_MONTH_RE.match(token)
            if month_match:
                found_month = True
                month = month_match.lastindex
                continue

        if not found_year:
            year_match = DATE_YEAR_RE.match(token)
            if year_match:
                found_year = True
                year = int(year_match.group(1))

    if not (found_time and found_day and found_month and found_year):
        return None

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    if not 1 <= day <= 31:
        return None
    if year < 1601 or hour > 23 or minute > 59 or second > 59:
        return None

    return float(calendar.timegm((year, month, day, hour, minute, second, -1, -1, -1)))


def split_set_cookie(raw):
    '''
    Returns name, value, and a list of (lowercased attribute name, value).
    '''
    nvp, _, rest = raw.partition(';')
    if '=' not in nvp:
        # 6265bis would make this a nameless cookie; we don't keep those
        raise RejectedCookie('empty cookie name', raw)
    name, _, value = nvp.partition('=')
    name = name.strip(' \t')
    value = value.strip(' \t')

    attrs = []
    for av in rest.split(';'):
        key, _, val = av.partition('=')
        key = key.strip(' \t').lower()
        if key:
            attrs.append((key, val.strip(' \t')))
    return name, value, attrs


def canonical_domain_attribute(domain):
    domain = domain.lstrip('.').lower()
    if domain.endswith('.'):
        domain = domain[:-1]
    try:
        domain.encode('ascii')
    except UnicodeEncodeError:
        try:
            domain = domain.encode('idna').decode('ascii')
        except UnicodeError:
            return None
    return domain


def check_prefixes(name, secure, host_only, path, raw=None):
    lower = name.lower()
    if lower.startswith('__secure-') and not secure:
        raise RejectedCookie('__Secure- prefix without Secure', raw)
    if lower.startswith('__host-'):
        if not secure:
            raise RejectedCookie('__Host- prefix without Secure', raw)
        if not host_only:
            raise RejectedCookie('__Host- prefix with a Domain attribute', raw)
        if path != '/':
            raise RejectedCookie('__Host- prefix with a Path other than /', raw)


def parse_set_cookie(raw, request_host, request_path, now, suffix_list, secure_origin=True):
    '''
    Parse one Set-Cookie header value received from request_host for
    request_path. now is a POSIX timestamp, used to turn Max-Age into an
    absolute expiry.
    '''
    name, value, attrs = split_set_cookie(raw)

    if not name:
        raise RejectedCookie('empty cookie name', raw)
    if CTL_RE.search(name) or CTL_RE.search(value):
        raise RejectedCookie('control character in name or value', raw)
    if len(name) + len(value) > max_name_value_size:
        raise RejectedCookie('name and value larger than {} bytes'.format(max_name_value_size), raw)

    expires = None
    max_age = None
    domain = None
    path = None
    secure = False
    http_only = False
    same_site = record.LAX

    # later attributes override earlier ones
    for key, val in attrs:
        if len(val) > max_attribute_size:
            LOGGER.debug('ignoring oversized %s attribute of cookie %s', key, name)
            continue
        if key == 'expires':
            expires = parse_date(val)
            if expires is None:
                LOGGER.debug('ignoring malformed Expires %r of cookie %s', val, name)
        elif key == 'max-age':
            if MAX_AGE_RE.match(val):
                delta = int(val)
                max_age = now + delta if delta > 0 else EARLIEST
            else:
                LOGGER.debug('ignoring malformed Max-Age %r of cookie %s', val, name)
        elif key == 'domain':
            canon = canonical_domain_attribute(val)
            if canon is None:
                raise RejectedCookie('invalid Domain attribute', raw)
            if canon:
                domain = canon
        elif key == 'path':
            path = val if val.startswith('/') else None
        elif key == 'secure':
            secure = True
        elif key == 'httponly':
            http_only = True
        elif key == 'samesite':
            same_site = record.same_site_values.get(val.lower(), record.LAX)

    if max_age is not None:
        expiry = max_age
    else:
        expiry = expires

    if domain is not None and domain != request_host:
        if is_ip_address(request_host):
            raise RejectedCookie('Domain attribute on an IP address host', raw)
        if suffix_list.is_public_suffix(domain):
            raise RejectedCookie('Domain attribute is a public suffix', raw)
        if not domain_matches(domain, False, request_host):
            raise RejectedCookie('Domain attribute does not domain-match {}'.format(request_host), raw)
        host_only = False
    elif domain is not None:
        if suffix_list.is_public_suffix(domain):
            raise RejectedCookie('Domain attribute is a public suffix', raw)
        host_only = is_ip_address(request_host)
    else:
        domain = request_host
        host_only = True

    if path is None:
        path = default_path(request_path)

    if secure and not secure_origin:
        raise RejectedCookie('Secure cookie from an insecure origin', raw)
    if same_site == record.NONE and not secure:
        raise RejectedCookie('SameSite=None without Secure', raw)
    check_prefixes(name, secure, host_only, path, raw)

    return record.CookieRecord(name, value, domain, path=path, host_only=host_only,
                               secure=secure, http_only=http_only, same_site=same_site,
                               expiry=expiry)


def validate_record(rec, suffix_list):
    '''
    The same rejection rules, for records that didn't come from a header,
    e.g. ones reloaded from a save file.
    '''
    if not rec.name:
        raise RejectedCookie('empty cookie name')
    if not rec.domain:
        raise RejectedCookie('empty domain')
    if not rec.path or not rec.path.startswith('/'):
        raise RejectedCookie('path must start with /')
    if CTL_RE.search(rec.name) or CTL_RE.search(rec.value):
        raise RejectedCookie('control character in name or value')
    if not rec.host_only and suffix_list.is_public_suffix(rec.domain):
        raise RejectedCookie('domain {} is a public suffix'.format(rec.domain))
    if rec.same_site == record.NONE and not rec.secure:
        raise RejectedCookie('SameSite=None without Secure')
    check_prefixes(rec.name, rec.secure, rec.host_only, rec.path)
