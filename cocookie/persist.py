'''
Saving and loading the jar.

The save file is a single json document holding a flat list of cookie
records. Only persistent cookies are saved; session cookies die with the
process.

JsonPersister is the jar's persistence hook: after every change the jar
hands it a snapshot, which is written on a single worker thread. Nobody
waits for the write, and a failed write is logged and counted but never
undoes anything in memory.
'''

import concurrent.futures
import json
import logging
import os
import tempfile

from . import stats

LOGGER = logging.getLogger(__name__)
__NAME__ = 'cocookie-jar'
__VERSION__ = 1


def dump(records, f):
    json.dump({'format': __NAME__, 'version': __VERSION__, 'cookies': records}, f,
              sort_keys=True, indent=1)


def load(f):
    d = json.load(f)
    if not isinstance(d, dict) or d.get('format') != __NAME__:
        LOGGER.error('save file is not a %s save file', __NAME__)
        raise ValueError('not a {} save file'.format(__NAME__))
    if d.get('version') != __VERSION__:
        LOGGER.error('save file version %r is not %d', d.get('version'), __VERSION__)
        raise ValueError('unknown save file version {!r}'.format(d.get('version')))
    return d.get('cookies') or []


def save_file(records, filename):
    '''
    Write to a temporary file and rename, so a crash mid-write leaves the
    previous save intact.
    '''
    dirname = os.path.dirname(os.path.abspath(filename))
    fd, tmpname = tempfile.mkstemp(dir=dirname, prefix='.cookies', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w') as f:
            dump(records, f)
        os.replace(tmpname, filename)
    except BaseException:
        os.unlink(tmpname)
        raise


def load_file(filename):
    with open(filename, 'r') as f:
        return load(f)


class JsonPersister:
    def __init__(self, filename):
        self.filename = filename
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=1,
                                                              thread_name_prefix='cookie-persist')

    def submit(self, records):
        try:
            f = self.executor.submit(save_file, records, self.filename)
        except RuntimeError as e:
            # executor already shut down
            LOGGER.warning('not saving cookies to %s: %s', self.filename, e)
            stats.stats_sum('cookie persist failed', 1)
            return None
        f.add_done_callback(self._done)
        return f

    def _done(self, f):
        if f.cancelled():
            return
        e = f.exception()
        if e is not None:
            LOGGER.warning('saving cookies to %s failed: %r', self.filename, e)
            stats.stats_sum('cookie persist failed', 1)
        else:
            stats.stats_sum('cookie persist saved', 1)

    def load(self):
        if not os.path.exists(self.filename):
            LOGGER.info('no cookie save file %s, starting empty', self.filename)
            return []
        return load_file(self.filename)

    def close(self):
        self.executor.shutdown(wait=True)
