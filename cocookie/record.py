'''
The cookie record, the unit the store keeps and the persister saves.
'''

STRICT = 'Strict'
LAX = 'Lax'
NONE = 'None'

same_site_values = {'strict': STRICT, 'lax': LAX, 'none': NONE}

# attributes saved by the persister, in order
persisted_fields = ('name', 'value', 'domain', 'host_only', 'path', 'secure', 'http_only',
                    'same_site', 'expiry', 'creation_time')


class CookieRecord:
    '''
    One cookie. expiry is a POSIX timestamp, or None for a session cookie.

    creation_time and seq are assigned by the store on first insert and
    survive later overwrites of the same key.
    '''
    __slots__ = ('name', 'value', 'domain', 'host_only', 'path', 'secure', 'http_only',
                 'same_site', 'expiry', 'creation_time', 'last_access_time', 'seq')

    def __init__(self, name, value, domain, path='/', host_only=True, secure=False,
                 http_only=False, same_site=LAX, expiry=None, creation_time=None,
                 last_access_time=None, seq=None):
        self.name = name
        self.value = value
        self.domain = domain
        self.host_only = host_only
        self.path = path
        self.secure = secure
        self.http_only = http_only
        self.same_site = same_site
        self.expiry = expiry
        self.creation_time = creation_time
        self.last_access_time = last_access_time
        self.seq = seq

    @property
    def key(self):
        return (self.name, self.domain, self.host_only, self.path)

    @property
    def is_session(self):
        return self.expiry is None

    def is_expired(self, now):
        return self.expiry is not None and self.expiry <= now

    def to_dict(self):
        return dict((f, getattr(self, f)) for f in persisted_fields)

    @classmethod
    def from_dict(cls, d):
        kwargs = dict((f, d[f]) for f in persisted_fields if f in d)
        if 'same_site' in kwargs:
            kwargs['same_site'] = same_site_values.get(str(kwargs['same_site']).lower(), LAX)
        return cls(**kwargs)

    def __str__(self):
        scope = self.domain if self.host_only else '.' + self.domain
        return '<Cookie {}={} for {}{}>'.format(self.name, self.value, scope, self.path)

    def __repr__(self):
        args = ', '.join('{}={!r}'.format(s, getattr(self, s)) for s in self.__slots__)
        return 'CookieRecord({})'.format(args)
