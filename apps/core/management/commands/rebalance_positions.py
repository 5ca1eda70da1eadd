# apps/core/management/commands/rebalance_positions.py

from django.core.management.base import BaseCommand, CommandError

from apps.board import reorder
from apps.core.models import Board


class Command(BaseCommand):
    help = 'Renumbers column and card positions to 0, 1, 2, ... keeping their order'

    def add_arguments(self, parser):
        parser.add_argument(
            '--board',
            help='Only rebalance this board'
        )

    def handle(self, *args, **options):
        boards = Board.objects.all()
        if options['board']:
            boards = boards.filter(pk=options['board'])
            if not boards.exists():
                raise CommandError(f"Board {options['board']} not found")

        total_boards = 0
        total_cards = 0
        for board in boards.prefetch_related('columns'):
            reorder.columns.rebalance(board.pk)
            for column in board.columns.all():
                total_cards += reorder.cards.rebalance(column.pk)
            total_boards += 1
            self.stdout.write(f'  ⚖️  {board.name} ({board.pk})')

        self.stdout.write(
            self.style.SUCCESS(f'✅ {total_boards} board(s) rebalanced, {total_cards} card(s) renumbered')
        )
