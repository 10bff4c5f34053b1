#!/usr/bin/env python

'''
Print the cookies in a cocookie save file, one per line, or with a url,
the Cookie header that url would get.

  cookiejar-dump.py cookies.json
  cookiejar-dump.py cookies.json https://github.com/
'''

import sys

import cocookie.config as config
import cocookie.persist as persist
from cocookie.cookies import CookieJar
from cocookie.errors import InvalidTarget

if len(sys.argv) < 2:
    print('usage: cookiejar-dump.py savefile [url ...]', file=sys.stderr)
    sys.exit(1)

f = sys.argv[1]
config.config(None, None)
jar = CookieJar.from_config(load=False)
saved = persist.load_file(f)
loaded = jar.load(saved)
print('{}: {} saved cookies, {} still good'.format(f, len(saved), loaded), file=sys.stderr)

if len(sys.argv) == 2:
    for rec in sorted(jar, key=lambda r: (r.domain, r.path, r.name)):
        print(rec, 'expires', rec.expiry)
else:
    for url in sys.argv[2:]:
        try:
            print(url, jar.header_for_request(url))
        except InvalidTarget as e:
            print(url, 'error:', e)
