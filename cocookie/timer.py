'''
Background sweep of expired cookies.

Reads never depend on this: the selector re-checks expiry itself, and the
jar prunes on demand. The sweep only keeps dead cookies from sitting in
memory (and in the save file) on a jar that isn't being read.
'''

import logging

import asyncio

from . import config
from . import stats

LOGGER = logging.getLogger(__name__)


async def exception_wrapper(partial, name):
    try:
        await partial()
    except asyncio.CancelledError:
        # this happens during teardown
        pass
    except Exception as e:
        LOGGER.error('timer %s threw an exception %r', name, e)


class PruneTimer:
    def __init__(self, jar, dt):
        self.jar = jar
        self.dt = dt

    async def timer(self):
        while True:
            await asyncio.sleep(self.dt)
            removed = self.jar.prune()
            stats.stats_sum('prune timer runs', 1)
            if removed:
                LOGGER.debug('prune timer removed %d expired cookies', removed)


def start_pruner(jar, dt=None):
    '''
    Must be called with a running event loop. Returns the task; hand it to
    close() when done.
    '''
    if dt is None:
        dt = float(config.read('CookieJar', 'PruneInterval') or 60)
    pruner = PruneTimer(jar, dt)
    return asyncio.ensure_future(exception_wrapper(pruner.timer, 'cookie prune timer'))


def close(task):
    if not task.done():
        task.cancel()
