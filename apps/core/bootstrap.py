# apps/core/bootstrap.py

"""
One-off database initialization

Runs at process startup (manage.py setup, or config/asgi.py when
GROOVE_MIGRATE_ON_STARTUP is set), never from request handlers.
"""

import logging

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError

logger = logging.getLogger(__name__)


def initialize_database(verbosity: int = 0) -> bool:
    """
    Applies pending migrations

    Returns True when the schema is up to date, False when migrating failed.
    """
    logger.info("📊 Applying migrations...")
    try:
        call_command('migrate', interactive=False, verbosity=verbosity)
    except (DatabaseError, CommandError) as e:
        logger.error(f"❌ Database initialization failed: {e}")
        return False

    logger.info("✅ Database ready")
    return True
