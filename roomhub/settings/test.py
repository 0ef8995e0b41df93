"""
Settings for the pytest suite.

The test database is a SQLite *file* (not the default in-memory database) so
that threaded tests get independent connections to the same data.
"""
from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'roomhub_test.sqlite3',
        'OPTIONS': {'timeout': 30},
        'TEST': {'NAME': str(BASE_DIR / 'roomhub_test.sqlite3')},
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

AXES_ENABLED = False

LOGGING['loggers']['apps']['level'] = 'WARNING'
