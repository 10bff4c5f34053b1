import pytest
import yarl

import cocookie.urls as urls
from cocookie.errors import InvalidTarget


def test_canonical_host():
    assert urls.canonical_host('Example.COM') == 'example.com'
    assert urls.canonical_host('example.com.') == 'example.com'
    assert urls.canonical_host('[::1]') == '::1'


def test_parse_target():
    t = urls.parse_target('https://API.Example.com/account?x=1')
    assert t.scheme == 'https'
    assert t.host == 'api.example.com'
    assert t.path == '/account'
    assert t.secure

    t = urls.parse_target('http://example.com')
    assert t.path == '/'
    assert not t.secure

    t = urls.parse_target('http://example.com:8080/a/b')
    assert t.host == 'example.com'
    assert t.path == '/a/b'

    t = urls.parse_target(yarl.URL('wss://example.com/socket'))
    assert t.secure
    assert t.path == '/socket'


def test_parse_target_idn():
    t = urls.parse_target('http://bücher.example/')
    assert t.host == 'xn--bcher-kva.example'


def test_parse_target_invalid():
    for bad in ('', 'example.com', '/just/a/path', 'ftp://example.com/', 'mailto:a@example.com',
                'http://', 'http:///path'):
        with pytest.raises(InvalidTarget):
            urls.parse_target(bad)
    with pytest.raises(InvalidTarget):
        urls.parse_target(None)
    with pytest.raises(ValueError):
        urls.parse_target(12)
