'''
The cookie store: every live cookie, bucketed by registrable domain.

The aiohttp cookie jar looks at every cookie for every request. Here a
request only looks at the bucket for its own registrable domain, which is
also the unit for the per-domain cookie limit.

The store does no locking; the jar facade wraps it in a reader-writer lock.
'''

import itertools
import logging

from .errors import CapacityEvicted
from .match import domain_matches

LOGGER = logging.getLogger(__name__)


def lru_order(rec):
    return (rec.last_access_time, rec.seq)


class CookieStore:
    def __init__(self, suffix_list, max_per_domain=50, max_total=3000):
        if max_per_domain < 1 or max_total < 1:
            raise ValueError('cookie limits must be at least 1')
        self.suffix_list = suffix_list
        self.max_per_domain = max_per_domain
        self.max_total = max_total
        self._buckets = {}
        self._count = 0
        self._seq = itertools.count(1)
        self._earliest_expiry = None

    def __len__(self):
        return self._count

    def __iter__(self):
        return iter(self.records())

    def records(self):
        return [rec for bucket in self._buckets.values() for rec in bucket.values()]

    def bucket_key(self, host):
        return self.suffix_list.registrable_domain(host)

    def get(self, key):
        bucket = self._buckets.get(self.bucket_key(key[1]))
        if bucket:
            return bucket.get(key)

    def insert(self, rec, now):
        '''
        Add or overwrite rec. An overwrite keeps the original creation_time
        and seq, so the cookie keeps its place in the Cookie header.

        An already-expired rec deletes any existing cookie with its key.

        Returns a list of CapacityEvicted for cookies removed to make room.
        rec itself is never evicted.
        '''
        bkey = self.bucket_key(rec.domain)
        bucket = self._buckets.get(bkey)
        old = bucket.get(rec.key) if bucket else None

        if rec.is_expired(now):
            if old is not None:
                self._remove(bkey, rec.key)
                LOGGER.debug('cookie %s deleted by an expired Set-Cookie', old)
            return []

        if old is not None:
            rec.creation_time = old.creation_time
            rec.seq = old.seq
        else:
            if rec.creation_time is None:
                rec.creation_time = now
            rec.seq = next(self._seq)
            self._count += 1
        rec.last_access_time = now

        if bucket is None:
            bucket = self._buckets[bkey] = {}
        bucket[rec.key] = rec

        if rec.expiry is not None:
            if self._earliest_expiry is None or rec.expiry < self._earliest_expiry:
                self._earliest_expiry = rec.expiry

        return self._enforce_limits(bkey, rec, now)

    def remove(self, key):
        bkey = self.bucket_key(key[1])
        bucket = self._buckets.get(bkey)
        if not bucket or key not in bucket:
            return None
        rec = bucket[key]
        self._remove(bkey, key)
        return rec

    def _remove(self, bkey, key):
        bucket = self._buckets[bkey]
        del bucket[key]
        self._count -= 1
        if not bucket:
            del self._buckets[bkey]

    def _prune_bucket(self, bkey, now):
        bucket = self._buckets[bkey]
        expired = [key for key, rec in bucket.items() if rec.is_expired(now)]
        for key in expired:
            self._remove(bkey, key)
        return len(expired)

    def _enforce_limits(self, bkey, keep, now):
        evicted = []

        if len(self._buckets[bkey]) > self.max_per_domain:
            self._prune_bucket(bkey, now)
            bucket = self._buckets[bkey]
            while len(bucket) > self.max_per_domain:
                victim = min((r for r in bucket.values() if r is not keep), key=lru_order)
                self._remove(bkey, victim.key)
                evicted.append(CapacityEvicted(victim, 'domain'))

        if self._count > self.max_total:
            self.prune(now)
            while self._count > self.max_total:
                victim = min((r for r in self.records() if r is not keep), key=lru_order)
                self._remove(self.bucket_key(victim.domain), victim.key)
                evicted.append(CapacityEvicted(victim, 'total'))

        return evicted

    def needs_prune(self, now):
        return self._earliest_expiry is not None and self._earliest_expiry <= now

    def prune(self, now):
        '''
        Remove expired cookies. Returns how many were removed.
        '''
        removed = 0
        earliest = None
        for bkey in list(self._buckets):
            removed += self._prune_bucket(bkey, now)
            for rec in self._buckets.get(bkey, {}).values():
                if rec.expiry is not None and (earliest is None or rec.expiry < earliest):
                    earliest = rec.expiry
        self._earliest_expiry = earliest
        if removed:
            LOGGER.debug('pruned %d expired cookies', removed)
        return removed

    def all_for(self, host, now):
        '''
        Unexpired cookies whose domain matches host. Path, Secure and
        SameSite are the selector's business.
        '''
        bucket = self._buckets.get(self.bucket_key(host))
        if not bucket:
            return []
        return [rec for rec in bucket.values()
                if not rec.is_expired(now) and domain_matches(rec.domain, rec.host_only, host)]

    def clear(self, predicate=None):
        removed = 0
        for rec in self.records():
            if predicate is None or predicate(rec):
                self._remove(self.bucket_key(rec.domain), rec.key)
                removed += 1
        return removed

    def clear_domain(self, domain):
        '''
        Remove cookies for domain and all of its subdomains.
        '''
        return self.clear(lambda rec: domain_matches(domain, False, rec.domain))

    def end_session(self):
        return self.clear(lambda rec: rec.is_session)
