#!/usr/bin/env python

'''
Fetches some urls in order with aiohttp, carrying cookies between them in
a cocookie jar, and shows the Cookie header sent with each request.

  cookiejar-fetch.py https://github.com/ https://github.com/login
  cookiejar-fetch.py --config CookieJar.SaveFile:cookies.json https://example.com/
'''

import os
import sys
from traceback import print_exc

import argparse
import asyncio
import logging

import aiohttp

import cocookie.config as config
import cocookie.stats as stats
import cocookie.timer as timer
from cocookie.aiohttp_jar import AiohttpCookieJar
from cocookie.cookies import CookieJar

LOGGER = logging.getLogger(__name__)

ARGS = argparse.ArgumentParser(description='fetch urls, keeping cookies in a cocookie jar')
ARGS.add_argument('urls', nargs='+')
ARGS.add_argument('--config', action='append')
ARGS.add_argument('--configfile', action='store')
ARGS.add_argument('--printdefault', action='store_true', help='print the default configuration')
ARGS.add_argument('--printfinal', action='store_true', help='print the final configuration')
ARGS.add_argument('--loglevel', action='store', help='set logging level, default from config')
ARGS.add_argument('--verbose', '-v', action='count', help='set logging level to DEBUG')
ARGS.add_argument('--stats', action='store_true', help='log a stats report at the end')


async def fetch_all(jar, urls):
    pruner = timer.start_pruner(jar)
    cookie_jar = AiohttpCookieJar(jar)

    async with aiohttp.ClientSession(cookie_jar=cookie_jar) as session:
        for url in urls:
            if not url.startswith('http'):
                url = 'http://' + url

            print(url)
            print('  cookie header:', jar.header_for_request(url) or '(none)')
            try:
                async with session.get(url, allow_redirects=True) as response:
                    await response.read()
            except aiohttp.ClientConnectorError as e:
                print('saw connect error for', url, ':', e, file=sys.stderr)
                continue
            except Exception:
                print('Saw an exception thrown by session.get:')
                print_exc()
                print('')
                continue

            print('  status:', response.status)
            if str(response.url) != url:
                print('  final url:', str(response.url))
            for h in response.history:
                for v in h.headers.getall('Set-Cookie', []):
                    print('  set-cookie (redirect):', v)
            for v in response.headers.getall('Set-Cookie', []):
                print('  set-cookie:', v)
            print('')

    timer.close(pruner)
    print('jar now holds {} cookies:'.format(len(jar)))
    for rec in jar:
        print('  ', rec)


def main():
    args = ARGS.parse_args()

    if args.printdefault:
        config.print_default()
        sys.exit(1)

    config.config(args.configfile, args.config)

    if args.printfinal:
        config.print_final()
        sys.exit(1)

    loglevel = os.getenv('COCOOKIE_LOGLEVEL')
    if loglevel is None and args.loglevel:
        loglevel = args.loglevel
    if loglevel is None and args.verbose:
        loglevel = 'DEBUG'
    if loglevel is None:
        loglevel = config.read('Logging', 'LoggingLevel') or 'INFO'

    logging.basicConfig(level=loglevel)

    jar = CookieJar.from_config()
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(fetch_all(jar, args.urls))
        # vodoo recommended by advanced aiohttp docs for graceful shutdown
        # https://github.com/aio-libs/aiohttp/issues/1925
        loop.run_until_complete(asyncio.sleep(0.250))
    except KeyboardInterrupt:
        LOGGER.warning('interrupted, saving what we have')
    finally:
        jar.close()
        loop.close()

    if args.stats:
        stats.report()


if __name__ == '__main__':
    main()
