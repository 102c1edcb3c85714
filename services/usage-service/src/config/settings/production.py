"""
Production settings for Usage Service
"""

from .base import *

DEBUG = False

SECURE_SSL_REDIRECT = os.environ.get('SECURE_SSL_REDIRECT', 'True').lower() == 'true'
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

CONN_MAX_AGE = int(os.environ.get('DB_CONN_MAX_AGE', 60))
DATABASES['default']['CONN_MAX_AGE'] = CONN_MAX_AGE
