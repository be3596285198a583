"""
WSGI config for acts29_ministry project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'acts29_ministry.settings')

application = get_wsgi_application()
