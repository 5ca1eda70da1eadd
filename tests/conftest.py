# tests/conftest.py

"""Shared fixtures: accounts, logged-in clients and a classic board."""

import pytest
from django.test import Client

from apps.board import services
from apps.core.models import Account, BoardMember

PASSWORD = 'correct-horse-battery'


@pytest.fixture
def make_account(db):
    """Factory for accounts with a known password."""

    def factory(email, first_name='', last_name=''):
        return Account.objects.create_user(
            email=email,
            password=PASSWORD,
            first_name=first_name,
            last_name=last_name,
        )

    return factory


@pytest.fixture
def owner(make_account):
    return make_account('owner@example.com', 'Olivia', 'Owner')


@pytest.fixture
def editor(make_account):
    return make_account('editor@example.com', 'Eddie', 'Editor')


@pytest.fixture
def outsider(make_account):
    return make_account('outsider@example.com')


@pytest.fixture
def client_for():
    """Returns a test client logged in as the given account."""

    def factory(account):
        client = Client()
        client.force_login(account)
        return client

    return factory


@pytest.fixture
def board(owner, editor):
    """Classic board of `owner` with `editor` as member."""
    board = services.create_board(owner, 'Roadmap')
    BoardMember.objects.create(board=board, account=editor, role=BoardMember.ROLE_EDITOR)
    return board


@pytest.fixture
def columns(board):
    """Columns of the board by name: Not Now, May be?, Done."""
    return {column.name: column for column in board.columns.all()}


@pytest.fixture
def make_item(owner, board):
    """Creates cards through the service so positions are real."""

    def factory(column, title, user=None):
        return services.create_item(user or owner, board, column.pk, title)

    return factory



@pytest.fixture
def password():
    return PASSWORD
