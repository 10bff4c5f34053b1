import logging
import yaml

LOGGER = logging.getLogger(__name__)

'''
default_yaml exists to both set defaults and to document all
possible configuration variables.
'''

default_yaml = '''
CookieJar:
  MaxCookiesPerDomain: 50
  MaxCookies: 3000
# seconds between background sweeps of expired cookies
  PruneInterval: 60
#  SaveFile: cookies.json

PublicSuffixList:
# empty means the snapshot bundled with tldextract, no network access
  Urls: []
#  Urls:
#  - https://publicsuffix.org/list/public_suffix_list.dat
  CacheDir:
  PrivateDomains: True

Logging:
  LoggingLevel: INFO
'''

_config = {}


def print_default():
    print(default_yaml)


def print_final():
    print(yaml.safe_dump(_config, default_flow_style=False))


def merge_dicts(a, b):
    '''
    Merge 2-level dict b into a.
    Not very general purpose!
    '''
    c = a
    for k1 in b:
        for k2 in b[k1]:
            v = b[k1][k2]
            if k1 not in c or not c[k1]:
                c[k1] = {}
            c[k1][k2] = v
    return c


def type_fixup(rhs):
    '''
    Command-line values arrive as strings; let yaml give them their
    natural types. Only lists and scalars yaml recognizes are converted.
    '''
    if rhs.startswith('[') and rhs.endswith(']'):
        return [x.strip() for x in rhs[1:-1].split(',') if x.strip()]
    try:
        value = yaml.safe_load(rhs)
    except yaml.YAMLError:
        return rhs
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    return rhs


def config(configfile, configlist):
    '''
    Return a config dict which is the sum of all the various configurations
    '''

    default = yaml.safe_load(default_yaml)

    config_from_file = {}
    if configfile:
        with open(configfile, 'r') as c:
            config_from_file = yaml.safe_load(c) or {}

    combined = merge_dicts(default, config_from_file)

    if configlist:
        for c in configlist:
            # the syntax is... dangerous
            if ':' not in c:
                LOGGER.error('invalid config of %s', c)
                continue
            lhs, rhs = c.split(':', maxsplit=1)
            if '.' not in lhs:
                LOGGER.error('invalid config of %s', c)
                continue
            xpath = lhs.split('.')
            key = xpath.pop()
            try:
                temp = combined
                for x in xpath:
                    temp = temp[x]
                temp[key] = type_fixup(rhs)
            except Exception as e:
                LOGGER.error('invalid config of %s, exception was %r', c, e)
                continue

    set_config(combined)
    return combined


def set_config(c):
    global _config
    _config = c


def read(*l):
    '''
    config.read('CookieJar', 'MaxCookies') -- missing keys are None
    '''
    c = _config
    for name in l:
        if not isinstance(c, dict) or name not in c:
            return None
        c = c[name]
    return c
