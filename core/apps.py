"""
Core application configuration for Acts 29 Ministry.

This app contains shared utilities such as the API exception handler,
documentation tags and structured logging used across the project.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core'
