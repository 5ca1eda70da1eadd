#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Groove Board - collaborative kanban
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Development settings by default
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Groove Board shortcuts
    if len(sys.argv) > 1:
        command = sys.argv[1]

        # First run: schema + demo data
        if command == 'setup':
            import django
            from django.core.management import call_command

            django.setup()
            from apps.core.bootstrap import initialize_database

            print("🚀 Setting up Groove Board...")
            if not initialize_database(verbosity=1):
                print("❌ Migrations failed")
                sys.exit(1)

            print("🌱 Seeding demo data...")
            call_command('seed')
            print("✅ Setup finished!")
            return

        elif command == 'backup':
            print("💾 Creating database backup...")
            from datetime import datetime
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_file = f"backup_groove_{timestamp}.json"
            execute_from_command_line([sys.argv[0], 'dumpdata', '--indent', '2', '--output', backup_file])
            print(f"✅ Backup created: {backup_file}")
            return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
