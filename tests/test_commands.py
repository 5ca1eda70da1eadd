# tests/test_commands.py

"""Management commands and startup database initialization."""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError

from apps.core import bootstrap
from apps.core.models import Account, Board, Item

pytestmark = pytest.mark.django_db


class TestSeed:

    def test_creates_demo_board(self):
        call_command('seed', stdout=StringIO())

        account = Account.objects.get(email='demo@groove-board.app')
        board = Board.objects.get(owner=account)
        assert board.columns.count() == 3
        assert Item.objects.filter(board=board).count() == 6
        assert account.check_password('groove-demo')

    def test_is_idempotent(self):
        call_command('seed', stdout=StringIO())
        out = StringIO()

        call_command('seed', stdout=out)

        assert Board.objects.count() == 1
        assert 'already exists' in out.getvalue()


class TestRebalancePositions:

    def test_renumbers_every_column(self, board, columns, make_item):
        column = columns['May be?']
        items = [make_item(column, title) for title in 'abc']
        for item, position in zip(items, [-4.0, 0.25, 0.2500001]):
            Item.objects.filter(pk=item.pk).update(position=position)
        out = StringIO()

        call_command('rebalance_positions', board=board.pk, stdout=out)

        ordered = list(column.items.order_by('position').values_list('title', 'position'))
        assert ordered == [('a', 0.0), ('b', 1.0), ('c', 2.0)]
        assert '3 card(s) renumbered' in out.getvalue()

    def test_unknown_board(self, db):
        with pytest.raises(CommandError):
            call_command('rebalance_positions', board='zzzz-zzzz', stdout=StringIO())


class TestInitializeDatabase:

    def test_success(self, monkeypatch):
        calls = []
        monkeypatch.setattr(bootstrap, 'call_command', lambda *args, **kwargs: calls.append(args))

        assert bootstrap.initialize_database() is True
        assert calls == [('migrate',)]

    def test_failure_is_reported(self, monkeypatch):
        def broken(*args, **kwargs):
            raise DatabaseError('connection refused')

        monkeypatch.setattr(bootstrap, 'call_command', broken)

        assert bootstrap.initialize_database() is False
