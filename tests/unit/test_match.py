import cocookie.match as match


def test_domain_matches():
    dm = match.domain_matches
    assert dm('example.com', False, 'example.com')
    assert dm('example.com', False, 'api.example.com')
    assert dm('example.com', False, 'a.b.example.com')
    assert not dm('example.com', False, 'evilexample.com')
    assert not dm('example.com', False, 'example.org')
    assert not dm('api.example.com', False, 'example.com')
    assert not dm('example.com', False, '')


def test_domain_matches_host_only():
    dm = match.domain_matches
    assert dm('example.com', True, 'example.com')
    assert not dm('example.com', True, 'api.example.com')
    assert not dm('api.example.com', True, 'example.com')


def test_domain_matches_ip():
    dm = match.domain_matches
    assert dm('127.0.0.1', True, '127.0.0.1')
    assert dm('127.0.0.1', False, '127.0.0.1')
    assert not dm('0.0.1', False, '127.0.0.1')
    assert not dm('127.0.0.1', False, '127.0.0.2')


def test_path_matches():
    pm = match.path_matches
    assert pm('/', '/')
    assert pm('/', '/anything/at/all')
    assert pm('/docs', '/docs')
    assert pm('/docs', '/docs/')
    assert pm('/docs', '/docs/web')
    assert pm('/docs/', '/docs/web')
    assert not pm('/docs', '/docsets')
    assert not pm('/docs', '/doc')
    assert not pm('/docs/', '/docs')
    assert not pm('/docs', '/')


def test_default_path():
    dp = match.default_path
    assert dp('') == '/'
    assert dp('foo') == '/'
    assert dp('/') == '/'
    assert dp('/login') == '/'
    assert dp('/account/login') == '/account'
    assert dp('/account/') == '/account'
    assert dp('/a/b/c') == '/a/b'


def test_is_ip_address():
    assert match.is_ip_address('127.0.0.1')
    assert match.is_ip_address('::1')
    assert match.is_ip_address('[::1]')
    assert not match.is_ip_address('example.com')
    assert not match.is_ip_address('1.2.3.example.com')
    assert not match.is_ip_address('')
