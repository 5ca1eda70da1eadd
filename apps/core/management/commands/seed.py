# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.board import services
from apps.core.models import Account

DEMO_EMAIL = 'demo@groove-board.app'
DEMO_PASSWORD = 'groove-demo'

DEMO_CARDS = {
    'Not Now': ['Dark mode', 'Export board to CSV'],
    'May be?': ['Keyboard shortcuts cheat sheet', 'Invite the design team', 'Card templates'],
    'Done': ['Drag and drop between columns'],
}


class Command(BaseCommand):
    help = 'Creates a demo account with a populated board'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            default=DEMO_EMAIL,
            help='Email of the demo account'
        )

    def handle(self, *args, **options):
        email = options['email'].lower()

        if Account.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f'⚠️  {email} already exists, nothing to seed'))
            return

        self.stdout.write('🌱 Seeding demo data...')

        with transaction.atomic():
            account = Account.objects.create_user(
                email=email,
                password=DEMO_PASSWORD,
                first_name='Demo',
                last_name='User',
            )
            board = services.create_board(account, 'Product Roadmap', template='classic')

            columns = {column.name: column for column in board.columns.all()}
            for column_name, titles in DEMO_CARDS.items():
                for title in titles:
                    services.create_item(account, board, columns[column_name].pk, title)

        self.stdout.write(
            self.style.SUCCESS(
                f'✅ Demo board "{board.name}" created\n'
                f'🔑 Log in with: {email} / {DEMO_PASSWORD}'
            )
        )
