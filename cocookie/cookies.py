'''
The cookie jar, and the only way in or out of the cookie store.

Inbound: Set-Cookie values from a response go through the parser into
the store. Outbound: a request url goes through the selector, which reads
the store, and comes back as a Cookie header value.

Nothing in here is allowed to break the caller's request or response. A
bad Set-Cookie is logged and skipped; a bad request url raises
InvalidTarget, which callers that don't care can treat as "no cookies".

A jar is an ordinary object: make as many as you like, each with its own
limits, suffix list, and clock.
'''

import logging
import time

from . import config
from . import parse
from . import selector
from . import stats
from .errors import InvalidTarget, RejectedCookie
from .persist import JsonPersister
from .psl import PublicSuffixList
from .record import CookieRecord
from .rwlock import RWLock
from .store import CookieStore
from .urls import parse_target

LOGGER = logging.getLogger(__name__)


class CookieJar:
    def __init__(self, max_per_domain=50, max_total=3000, suffix_list=None, clock=None,
                 persister=None):
        self.suffix_list = suffix_list or PublicSuffixList()
        self.clock = clock or time.time
        self.persister = persister
        self._store = CookieStore(self.suffix_list, max_per_domain=max_per_domain,
                                  max_total=max_total)
        self._lock = RWLock()

    @classmethod
    def from_config(cls, clock=None, load=True):
        '''
        Build a jar from the CookieJar and PublicSuffixList config sections,
        reloading the save file if one is configured.
        '''
        suffix_list = PublicSuffixList.from_config(config.read('PublicSuffixList'))
        savefile = config.read('CookieJar', 'SaveFile')
        persister = JsonPersister(savefile) if savefile else None
        jar = cls(max_per_domain=int(config.read('CookieJar', 'MaxCookiesPerDomain') or 50),
                  max_total=int(config.read('CookieJar', 'MaxCookies') or 3000),
                  suffix_list=suffix_list, clock=clock, persister=persister)
        if persister and load:
            jar.load(persister.load())
        return jar

    def __len__(self):
        with self._lock.read_locked():
            return len(self._store)

    def __iter__(self):
        with self._lock.read_locked():
            records = self._store.records()
        return iter(records)

    def apply_response(self, url, header_values):
        '''
        Store the cookies from one response. header_values is a list of raw
        Set-Cookie values (a single str is accepted too). Returns the number
        of cookies stored.
        '''
        if isinstance(header_values, str):
            header_values = [header_values]

        try:
            target = parse_target(url)
        except InvalidTarget as e:
            LOGGER.info('ignoring Set-Cookie: %s', e)
            stats.stats_sum('cookies from invalid target', 1)
            return 0

        now = self.clock()
        records = []
        for raw in header_values:
            try:
                rec = parse.parse_set_cookie(raw, target.host, target.path, now, self.suffix_list,
                                             secure_origin=target.secure)
            except RejectedCookie as e:
                LOGGER.info('rejected cookie from %s: %s', target.host, e)
                stats.stats_sum('cookies rejected', 1)
                continue
            records.append(rec)

        if not records:
            return 0

        stored = 0
        with stats.record_burn('cookie jar apply_response', label=target.host):
            with self._lock.write_locked():
                for rec in records:
                    if rec.is_expired(now):
                        stats.stats_sum('cookies deleted by server', 1)
                    else:
                        stored += 1
                    self._log_evictions(self._store.insert(rec, now))
                stats.stats_max('max cookies in jar', len(self._store))
                self._persist(self._pending_snapshot())

        stats.stats_sum('cookies stored', stored)
        return stored

    def cookies_for_request(self, url, context=None):
        '''
        The (name, value) pairs to send to url, in Cookie header order.
        Raises InvalidTarget if url can't carry cookies.
        '''
        target = parse_target(url)
        context = context or selector.DIRECT_NAVIGATION
        now = self.clock()

        # an unlocked peek; prune() itself takes the write lock
        if self._store.needs_prune(now):
            self.prune(now)

        with stats.record_burn('cookie jar select', label=target.host):
            with self._lock.read_locked():
                pairs = selector.cookies_for_request(self._store, target, context, now)

        stats.stats_sum('cookies sent', len(pairs))
        return pairs

    def header_for_request(self, url, context=None):
        '''
        The Cookie header value for url, or '' if no cookies apply.
        '''
        return selector.serialize(self.cookies_for_request(url, context=context))

    def prune(self, now=None):
        if now is None:
            now = self.clock()
        with self._lock.write_locked():
            removed = self._store.prune(now)
            if removed:
                self._persist(self._pending_snapshot())
        if removed:
            stats.stats_sum('cookies expired', removed)
        return removed

    def end_session(self):
        '''
        The session is over: forget every cookie without an expiry.
        '''
        with self._lock.write_locked():
            removed = self._store.end_session()
        LOGGER.debug('session ended, dropped %d session cookies', removed)
        return removed

    def clear(self, predicate=None):
        with self._lock.write_locked():
            removed = self._store.clear(predicate)
            self._persist(self._pending_snapshot())
        return removed

    def clear_domain(self, domain):
        domain = domain.lower().lstrip('.')
        with self._lock.write_locked():
            removed = self._store.clear_domain(domain)
            self._persist(self._pending_snapshot())
        return removed

    def load(self, records):
        '''
        Add saved records (dicts or CookieRecords). Each goes through the
        same validation as a fresh Set-Cookie; anything that fails, or has
        expired since it was saved, is quietly dropped.
        '''
        now = self.clock()
        good = []
        for d in records:
            try:
                rec = d if isinstance(d, CookieRecord) else CookieRecord.from_dict(d)
                rec.domain = rec.domain.lower()
                if rec.expiry is not None:
                    rec.expiry = float(rec.expiry)
                if rec.creation_time is not None:
                    rec.creation_time = float(rec.creation_time)
                parse.validate_record(rec, self.suffix_list)
                if rec.is_expired(now):
                    raise RejectedCookie('expired')
            except (RejectedCookie, AttributeError, KeyError, TypeError, ValueError) as e:
                LOGGER.debug('dropping saved cookie %r: %s', d, e)
                stats.stats_sum('saved cookies dropped', 1)
                continue
            good.append(rec)

        # oldest first, so seq numbers follow the original creation order
        good.sort(key=lambda r: (r.creation_time is None, r.creation_time or 0))
        with self._lock.write_locked():
            for rec in good:
                self._log_evictions(self._store.insert(rec, now))
        LOGGER.info('loaded %d saved cookies', len(good))
        stats.stats_sum('saved cookies loaded', len(good))
        return len(good)

    def snapshot(self):
        '''
        The persistent cookies as a list of dicts, oldest first.
        '''
        with self._lock.read_locked():
            return self._snapshot_locked()

    def _snapshot_locked(self):
        records = [rec for rec in self._store.records() if not rec.is_session]
        records.sort(key=lambda r: (r.creation_time, r.seq))
        return [rec.to_dict() for rec in records]

    def _pending_snapshot(self):
        if self.persister is None:
            return None
        return self._snapshot_locked()

    def save(self):
        with self._lock.write_locked():
            self._persist(self._pending_snapshot())

    def close(self):
        if self.persister is not None:
            self.save()
            self.persister.close()

    def _persist(self, snapshot):
        # called with the write lock held, so snapshots reach the persister
        # in the order of the changes they record. submit must not block.
        if self.persister is None or snapshot is None:
            return
        try:
            self.persister.submit(snapshot)
        except Exception as e:
            LOGGER.warning('cookie persistence hook raised %r', e)
            stats.stats_sum('cookie persist failed', 1)

    def _log_evictions(self, evicted):
        for ev in evicted:
            LOGGER.debug('evicted %s to respect the per-%s cookie limit', ev.record, ev.scope)
            stats.stats_sum('cookies evicted', 1)
