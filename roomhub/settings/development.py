from .base import *

DEBUG = True

INTERNAL_IPS = ['127.0.0.1']

# Relax axes in dev
AXES_ENABLED = False

LOGGING['loggers']['apps']['level'] = 'DEBUG'
