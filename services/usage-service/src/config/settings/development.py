"""
Development settings for Usage Service
"""

from .base import *

DEBUG = True

DATABASES['default']['HOST'] = os.environ.get('DB_HOST', 'localhost')
DATABASES['default']['PORT'] = os.environ.get('DB_PORT', '5432')

CORS_ALLOW_ALL_ORIGINS = True

LOGGING['handlers']['console']['formatter'] = 'standard'
LOGGING['loggers']['apps']['level'] = 'DEBUG'
