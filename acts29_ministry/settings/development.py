"""
Development settings for acts29_ministry project.

This file contains settings specific to local development.
"""

from .base import *

# ============================================================================
# DEBUG & DEVELOPMENT
# ============================================================================

DEBUG = True
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# ============================================================================
# DATABASE - Development
# ============================================================================

# SQLite unless a PostgreSQL database is configured
if not config('DB_HOST', default=''):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# ============================================================================
# EMAIL BACKEND - Development
# ============================================================================

if config('USE_MAILHOG', default=False, cast=bool):
    # Use MailHog for local email testing
    EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
    EMAIL_HOST = 'localhost'
    EMAIL_PORT = 1025
    EMAIL_USE_TLS = False
else:
    # Default: Print emails to console (no external service needed)
    EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# ============================================================================
# CORS & CSRF - Development
# ============================================================================

CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

CSRF_TRUSTED_ORIGINS = [
    'http://localhost:3000',
    'http://127.0.0.1:3000',
]

# ============================================================================
# CELERY - Development
# ============================================================================

# Run automation tasks inline unless a broker is explicitly configured
CELERY_TASK_ALWAYS_EAGER = config(
    'CELERY_TASK_ALWAYS_EAGER', default=True, cast=bool)

# ============================================================================
# LOGGING - Development
# ============================================================================

LOGGING['loggers']['automations']['level'] = 'DEBUG'
