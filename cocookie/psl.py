'''
Public suffix list and registrable domains.

The jar never hardcodes a suffix list: it is handed an object with
is_public_suffix(domain) and registrable_domain(host). The default one
wraps tldextract; by default it uses the snapshot bundled with tldextract
so that startup never touches the network. Give it urls to fetch a fresh
list, and a cache_dir to keep it between runs.
'''

import logging
import operator
import threading

import cachetools
import tldextract

from .match import is_ip_address

LOGGER = logging.getLogger(__name__)


def unlisted_registrable_domain(host):
    '''
    A tld missing from the list counts as a public suffix, as under the
    list's default "*" rule: a.intranet and b.intranet are different sites.
    '''
    return '.'.join(host.split('.')[-2:])


class PublicSuffixList:
    def __init__(self, urls=(), cache_dir=None, private_domains=True, cache_size=10000):
        urls = tuple(urls or ())
        self._extractor = tldextract.TLDExtract(cache_dir=cache_dir,
                                                suffix_list_urls=urls,
                                                fallback_to_snapshot=True,
                                                include_psl_private_domains=private_domains)
        self._cache = cachetools.LRUCache(maxsize=cache_size)
        self._lock = threading.Lock()
        LOGGER.debug('public suffix list from %s, private domains %s',
                     ', '.join(urls) or 'bundled snapshot', private_domains)

    @classmethod
    def from_config(cls, conf):
        conf = conf or {}
        return cls(urls=conf.get('Urls') or (),
                   cache_dir=conf.get('CacheDir'),
                   private_domains=conf.get('PrivateDomains', True))

    @cachetools.cachedmethod(operator.attrgetter('_cache'), lock=operator.attrgetter('_lock'))
    def _extract(self, host):
        return self._extractor(host)

    def is_public_suffix(self, domain):
        if not domain or is_ip_address(domain):
            return False
        tlde = self._extract(domain)
        if tlde.suffix:
            return not tlde.domain
        # an unknown tld is a suffix of its own
        return '.' not in domain

    def registrable_domain(self, host):
        if is_ip_address(host):
            return host
        tlde = self._extract(host)
        if tlde.suffix:
            if tlde.domain:
                return tlde.domain + '.' + tlde.suffix
            return host
        return unlisted_registrable_domain(host)


class FixedSuffixList:
    '''
    An explicit set of public suffixes. Handy for tests and for intranets
    that want to pin the list.
    '''
    def __init__(self, suffixes):
        self.suffixes = set(s.lower().strip('.') for s in suffixes)

    def is_public_suffix(self, domain):
        if domain in self.suffixes:
            return True
        return bool(domain) and '.' not in domain and not is_ip_address(domain)

    def registrable_domain(self, host):
        if is_ip_address(host):
            return host
        labels = host.split('.')
        for i in range(len(labels)):
            if '.'.join(labels[i:]) in self.suffixes:
                if i == 0:
                    return host
                return '.'.join(labels[i-1:])
        return unlisted_registrable_domain(host)
