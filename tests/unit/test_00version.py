'''
Misc unit tests, run first.
'''

import sys


def test_python_version():
    assert sys.version_info >= (3, 8), 'Python 3.8+ needed'
