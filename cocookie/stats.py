'''
A trivial stats system for the cookie jar.

Counters are process-wide and shared by every jar. The jar is called from
many threads, so updates take a lock; a lost update would only cost us a
count, but it's cheap to get right.
'''

import logging
import threading
import time
from contextlib import contextmanager

from sortedcollections import ValueSortedDict

LOGGER = logging.getLogger(__name__)

start_time = time.time()
maxes = {}
sums = {}
sets = {}
burners = {}
_lock = threading.Lock()


def stats_max(name, value):
    with _lock:
        maxes[name] = max(maxes.get(name, value), value)


def stats_sum(name, value):
    with _lock:
        sums[name] = sums.get(name, 0) + value
        return sums[name]


def stats_set(name, value):
    with _lock:
        sets[name] = value


def record_a_burn(name, start, label=None):
    elapsed = time.process_time() - start
    with _lock:
        burn = burners.get(name, {})
        burn['count'] = burn.get('count', 0) + 1
        burn['time'] = burn.get('time', 0.0) + elapsed
        avg = burn.get('avg', 10000000.)

        # are we exceptional? 10x current average and significant
        if elapsed > avg * 10 and elapsed > 0.005:
            if 'list' not in burn:
                burn['list'] = ValueSortedDict()
            label = label or 'none'
            burn['list'][label] = -elapsed
            length = len(burn['list'])
            for _ in range(10, length):
                burn['list'].popitem()

        burn['avg'] = burn['time']/burn['count']
        burners[name] = burn


@contextmanager
def record_burn(name, label=None):
    start = time.process_time()
    try:
        yield
    finally:
        record_a_burn(name, start, label=label)


def stat_value(name):
    if name in maxes:
        return maxes[name]
    if name in sums:
        return sums[name]
    if name in sets:
        return sets[name]
    if name in burners:
        return burners[name].get('time', 0)
    return None


def burn_values(name):
    if name in burners:
        return burners[name].get('time', 0), burners[name].get('count', 0)
    else:
        return None, None


def report():
    LOGGER.info('Stats report:')
    for s in sorted(sums):
        LOGGER.info('  %s: %d', s, sums[s])
    for s in sorted(maxes):
        LOGGER.info('  %s: %d', s, maxes[s])
    for s in sorted(sets):
        LOGGER.info('  %s: %s', s, sets[s])

    LOGGER.info('CPU burn report:')
    for key, burn in sorted(burners.items(), key=lambda x: x[1]['time'], reverse=True):
        LOGGER.info('  %s has %d calls taking %.3f cpu seconds.', key, burn['count'], burn['time'])
        if burn.get('list'):
            LOGGER.info('    biggest burners')
            for label in list(burn['list'].keys())[0:10]:
                e = - burn['list'][label]
                LOGGER.info('      %.3fs: %s', float(e), label)

    elapsed = time.time() - start_time
    LOGGER.info('  Elapsed time is %.3f seconds', elapsed)


def clear():
    global maxes
    global sums
    global sets
    with _lock:
        maxes = {}
        sums = {}
        sets = {}
        for b in burners:
            burners[b] = {'avg': burners[b].get('avg'), 'count': 0, 'time': 0}
