import cocookie.selector as selector
from cocookie.psl import FixedSuffixList
from cocookie.record import CookieRecord
from cocookie.selector import RequestContext
from cocookie.store import CookieStore
from cocookie.urls import parse_target

SUFFIXES = FixedSuffixList(['com', 'org'])


def make_store(*records, now=100.):
    store = CookieStore(SUFFIXES)
    for r in records:
        store.insert(r, now)
    return store


def names(store, url, context=selector.DIRECT_NAVIGATION, now=200.):
    return [name for name, _ in selector.cookies_for_request(store, parse_target(url), context, now)]


def test_path_filter():
    store = make_store(CookieRecord('root', '1', 'example.com', path='/'),
                       CookieRecord('docs', '2', 'example.com', path='/docs'))
    assert names(store, 'http://example.com/') == ['root']
    assert names(store, 'http://example.com/docs/web') == ['docs', 'root']
    assert names(store, 'http://example.com/docsets') == ['root']


def test_secure_filter():
    store = make_store(CookieRecord('s', '1', 'example.com', secure=True),
                       CookieRecord('p', '2', 'example.com'))
    assert names(store, 'https://example.com/') == ['s', 'p']
    assert names(store, 'http://example.com/') == ['p']
    assert names(store, 'ws://example.com/') == ['p']
    assert names(store, 'wss://example.com/') == ['s', 'p']


def test_ordering():
    store = CookieStore(SUFFIXES)
    store.insert(CookieRecord('late', '1', 'example.com', path='/'), 150.)
    store.insert(CookieRecord('early', '2', 'example.com', path='/'), 100.)
    store.insert(CookieRecord('deep', '3', 'example.com', path='/a/b'), 300.)
    store.insert(CookieRecord('mid', '4', 'example.com', path='/a'), 200.)
    assert names(store, 'http://example.com/a/b/c', now=400.) == ['deep', 'mid', 'early', 'late']


def test_ordering_same_time_uses_insertion_order():
    store = make_store(CookieRecord('b', '1', 'example.com'),
                       CookieRecord('a', '2', 'example.com'),
                       CookieRecord('c', '3', 'example.com'))
    assert names(store, 'http://example.com/') == ['b', 'a', 'c']


def test_updates_last_access_time():
    chosen = CookieRecord('a', '1', 'example.com')
    skipped = CookieRecord('b', '1', 'example.com', path='/other')
    store = make_store(chosen, skipped)
    assert chosen.last_access_time == 100.
    names(store, 'http://example.com/', now=250.)
    assert chosen.last_access_time == 250.
    assert skipped.last_access_time == 100.


def test_is_same_site():
    t = parse_target('https://api.example.com/')
    assert selector.is_same_site(t, RequestContext(), SUFFIXES)
    assert selector.is_same_site(t, RequestContext('https://www.example.com/page'), SUFFIXES)
    assert selector.is_same_site(t, RequestContext('example.com'), SUFFIXES)
    assert not selector.is_same_site(t, RequestContext('https://evil.org/'), SUFFIXES)
    assert not selector.is_same_site(t, RequestContext('https://evilexample.com/'), SUFFIXES)
    assert not selector.is_same_site(t, RequestContext('notaurl://'), SUFFIXES)

    # unlisted tld
    t = parse_target('http://app.a.intranet/')
    assert selector.is_same_site(t, RequestContext('http://www.a.intranet/'), SUFFIXES)
    assert not selector.is_same_site(t, RequestContext('http://b.intranet/'), SUFFIXES)


def same_site_store():
    return make_store(CookieRecord('strict', '1', 'example.com', same_site='Strict'),
                      CookieRecord('lax', '2', 'example.com', same_site='Lax'),
                      CookieRecord('none', '3', 'example.com', same_site='None', secure=True))


def test_same_site_direct_navigation():
    store = same_site_store()
    assert names(store, 'https://example.com/') == ['strict', 'lax', 'none']


def test_same_site_same_site_subresource():
    store = same_site_store()
    ctx = RequestContext('https://www.example.com/', top_level=False)
    assert names(store, 'https://example.com/', ctx) == ['lax', 'none']


def test_same_site_cross_site():
    store = same_site_store()
    # cross-site top-level GET
    ctx = RequestContext('https://other.org/', top_level=True, safe_method=True)
    assert names(store, 'https://example.com/', ctx) == ['lax', 'none']
    # cross-site top-level POST
    ctx = RequestContext('https://other.org/', top_level=True, safe_method=False)
    assert names(store, 'https://example.com/', ctx) == ['none']
    # cross-site subresource
    ctx = RequestContext('https://other.org/', top_level=False)
    assert names(store, 'https://example.com/', ctx) == ['none']


def test_same_site_none_still_needs_secure_transport():
    store = same_site_store()
    ctx = RequestContext('https://other.org/', top_level=False)
    assert names(store, 'http://example.com/', ctx) == []


def test_context_for_method():
    assert selector.context_for_method('get').safe_method
    assert selector.context_for_method('HEAD').safe_method
    assert not selector.context_for_method('POST').safe_method
    ctx = selector.context_for_method('DELETE', site_for_cookies='https://example.com/', top_level=False)
    assert ctx == RequestContext('https://example.com/', False, False)


def test_no_match_is_empty():
    store = make_store(CookieRecord('a', '1', 'example.com'))
    assert names(store, 'https://other.org/') == []
    assert selector.serialize([]) == ''


def test_serialize():
    assert selector.serialize([('a', '1')]) == 'a=1'
    assert selector.serialize([('a', '1'), ('b', ''), ('a', '2')]) == 'a=1; b=; a=2'
