"""
Testing settings for acts29_ministry project.

This file contains settings specific to running tests.
Optimized for speed and isolation.
"""

from .base import *

# ============================================================================
# DEBUG & TESTING
# ============================================================================

DEBUG = False
TESTING = True

# ============================================================================
# DATABASE - Testing
# ============================================================================

# Use in-memory SQLite for faster tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# ============================================================================
# EMAIL BACKEND - Testing
# ============================================================================

# Use in-memory email backend for testing (no actual emails sent)
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
DEFAULT_FROM_EMAIL = 'test@acts29ministry.test'
SERVER_EMAIL = DEFAULT_FROM_EMAIL

# ============================================================================
# PASSWORD HASHING - Testing
# ============================================================================

# Use faster password hasher for tests (speeds up user creation)
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# ============================================================================
# CELERY - Testing
# ============================================================================

# Tasks run in-process; countdowns are ignored
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

# ============================================================================
# AUTOMATIONS - Testing
# ============================================================================

AUTOMATIONS = {
    **AUTOMATIONS,
    'SMS_GATEWAY_URL': '',
    'SMS_API_KEY': '',
    'SLACK_WEBHOOK_URL': '',
}

# ============================================================================
# LOGGING - Testing
# ============================================================================

# Minimize logging during tests (set to DEBUG to troubleshoot)
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'filters': {
        'sensitive_data_filter': {
            '()': 'core.logging.structured.SensitiveDataFilter',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'filters': ['sensitive_data_filter'],
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',  # Change to DEBUG to see detailed logs
    },
}

# ============================================================================
# THROTTLING - Testing
# ============================================================================

REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'user': '10000/hour',
    'automation_trigger': '10000/hour',
    'automation_manual_run': '10000/hour',
}

# ============================================================================
# SECURITY - Testing
# ============================================================================

SECRET_KEY = 'test-secret-key-not-for-production'  # nosec - test environment only
SIMPLE_JWT['SIGNING_KEY'] = SECRET_KEY
ALLOWED_HOSTS = ['*']
