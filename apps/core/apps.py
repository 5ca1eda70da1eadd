# apps/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app config: accounts, boards and their data"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core - Accounts and boards'

    def ready(self):
        """Connects signals"""
        from . import signals  # noqa: F401
