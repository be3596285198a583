"""
Production settings for acts29_ministry project.

This file contains settings specific to production deployment.
Security and performance optimized.
"""

import logging

from .base import *
import sentry_sdk
from sentry_sdk.integrations.celery import CeleryIntegration
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# ============================================================================
# SECRET KEY VALIDATION
# ============================================================================

SECRET_KEY = config('SECRET_KEY')
SIMPLE_JWT['SIGNING_KEY'] = SECRET_KEY

if SECRET_KEY.startswith('django-insecure-'):
    raise ValueError(
        "Production SECRET_KEY must not use the default insecure key. "
        "Please set a proper SECRET_KEY environment variable."
    )

if len(SECRET_KEY) < 32:
    raise ValueError(
        "Production SECRET_KEY must be at least 32 characters long for security. "
        f"Current length: {len(SECRET_KEY)}"
    )

# ============================================================================
# PRODUCTION SECURITY
# ============================================================================

DEBUG = False

ALLOWED_HOSTS_ENV = config('ALLOWED_HOSTS', default='')

if ALLOWED_HOSTS_ENV:
    ALLOWED_HOSTS = [host.strip()
                     for host in ALLOWED_HOSTS_ENV.split(',') if host.strip()]
else:
    ALLOWED_HOSTS = [
        'api.acts29ministry.org',
        'acts29ministry.org',
        'www.acts29ministry.org',
    ]

# ============================================================================
# DATABASE - Production (PostgreSQL)
# ============================================================================

DATABASES['default']['CONN_MAX_AGE'] = 60
DATABASES['default']['OPTIONS'] = {
    'sslmode': config('DB_SSLMODE', default='require'),
}

# ============================================================================
# SECURITY HEADERS - Production
# ============================================================================

SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=False, cast=bool)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = 'strict-origin-when-cross-origin'
X_FRAME_OPTIONS = 'DENY'

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

# ============================================================================
# CORS - Production
# ============================================================================

CORS_ALLOWED_ORIGINS = [
    "https://acts29ministry.org",
    "https://www.acts29ministry.org",
    config('FRONTEND_URL', default=''),
]
CORS_ALLOWED_ORIGINS = [origin for origin in CORS_ALLOWED_ORIGINS if origin]
CSRF_TRUSTED_ORIGINS = list(CORS_ALLOWED_ORIGINS)

# ============================================================================
# LOGGING - Production
# ============================================================================

LOGGING['root']['handlers'] = ['structured_console']
LOGGING['loggers']['django']['handlers'] = ['structured_console']

# ============================================================================
# MONITORING - Sentry
# ============================================================================

SENTRY_DSN = config('SENTRY_DSN', default=None)

if SENTRY_DSN:
    sentry_logging = LoggingIntegration(
        level=logging.INFO,
        event_level=logging.ERROR
    )

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(
                transaction_style='url',
                middleware_spans=True,
            ),
            CeleryIntegration(),
            sentry_logging,
        ],
        traces_sample_rate=0.1,
        # Trigger data carries donor and volunteer contact details
        send_default_pii=False,
        environment=config('SENTRY_ENVIRONMENT', default='production'),
    )

# ============================================================================
# API THROTTLING - Production (Strict)
# ============================================================================

REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'user': '1000/hour',
    'automation_trigger': '300/hour',
    'automation_manual_run': '60/hour',
}
