import cocookie.config as config


def test_merge_dicts():
    a = {'a': {'a': 1}}
    b = {'b': {'b': 2}}

    c = config.merge_dicts(a, b)

    assert c == {'a': {'a': 1}, 'b': {'b': 2}}

    a = {'a': {'a': 1}, 'b': {'c': 3}}
    c = config.merge_dicts(a, b)

    assert c == {'a': {'a': 1}, 'b': {'b': 2, 'c': 3}}


def test_type_fixup():
    tests = (('a', 'a'),
             ('a,b,c', 'a,b,c'),
             ('[a,b,c]', ['a', 'b', 'c']),
             ('[]', []),
             ('10', 10),
             ('0.5', 0.5),
             ('True', True),
             ('cookies.json', 'cookies.json'))

    for arg, result in tests:
        assert config.type_fixup(arg) == result


def test_defaults_and_overrides(tmp_path):
    configfile = tmp_path / 'cookies.yml'
    configfile.write_text('CookieJar:\n  MaxCookies: 100\n  SaveFile: jar.json\n')

    c = config.config(str(configfile), ['CookieJar.MaxCookiesPerDomain:7',
                                        'PublicSuffixList.PrivateDomains:False',
                                        'nodot:1',
                                        'NoSuchSection.Foo:1',
                                        'no colon'])
    try:
        assert config.read('CookieJar', 'MaxCookies') == 100
        assert config.read('CookieJar', 'MaxCookiesPerDomain') == 7
        assert config.read('CookieJar', 'PruneInterval') == 60
        assert config.read('CookieJar', 'SaveFile') == 'jar.json'
        assert config.read('PublicSuffixList', 'PrivateDomains') is False
        assert config.read('PublicSuffixList', 'Urls') == []
        assert 'NoSuchSection' not in c
    finally:
        config.set_config({})


def test_read_missing():
    config.set_config({'CookieJar': {'MaxCookies': 5}})
    try:
        assert config.read('CookieJar', 'MaxCookies') == 5
        assert config.read('CookieJar', 'Nope') is None
        assert config.read('Nope', 'Nope') is None
        assert config.read('CookieJar', 'MaxCookies', 'deeper') is None
        assert config.read('CookieJar') == {'MaxCookies': 5}
    finally:
        config.set_config({})
