# tests/test_activity.py

"""Activity feed across the boards of the current user."""

import pytest

from apps.board import services
from apps.core.models import Activity

pytestmark = pytest.mark.django_db


@pytest.fixture
def busy_board(board, columns, make_item):
    """Board with 25 card creations on top of the board creation."""
    for index in range(25):
        make_item(columns['Done'], f'Card {index}')
    return board


class TestActivityFeed:

    def test_default_page(self, client_for, editor, busy_board):
        body = client_for(editor).get('/api/activity/').json()

        assert body['total'] == 26
        assert body['limit'] == 20
        assert body['offset'] == 0
        assert body['hasMore'] is True
        assert len(body['activities']) == 20
        assert body['activities'][0]['boardName'] == 'Roadmap'

    def test_last_page(self, client_for, editor, busy_board):
        body = client_for(editor).get('/api/activity/', {'limit': 10, 'offset': 20}).json()

        assert len(body['activities']) == 6
        assert body['hasMore'] is False

    def test_limit_is_capped(self, client_for, editor, busy_board):
        body = client_for(editor).get('/api/activity/', {'limit': 500}).json()

        assert body['limit'] == 100
        assert len(body['activities']) == 26

    def test_filter_by_type(self, client_for, editor, busy_board):
        body = client_for(editor).get('/api/activity/', {'type': Activity.BOARD_CREATED}).json()

        assert body['total'] == 1
        assert body['activities'][0]['type'] == Activity.BOARD_CREATED

    def test_filter_by_board(self, client_for, owner, busy_board):
        services.create_board(owner, 'Side project')

        body = client_for(owner).get('/api/activity/', {'boardId': busy_board.pk}).json()

        assert body['total'] == 26
        assert {a['boardId'] for a in body['activities']} == {busy_board.pk}

    def test_foreign_board_filter(self, client_for, outsider, busy_board):
        response = client_for(outsider).get('/api/activity/', {'boardId': busy_board.pk})

        assert response.status_code == 404

    def test_outsider_sees_nothing(self, client_for, outsider, busy_board):
        body = client_for(outsider).get('/api/activity/').json()

        assert body['total'] == 0
        assert body['activities'] == []

    def test_invalid_type(self, client_for, editor, busy_board):
        assert client_for(editor).get('/api/activity/', {'type': 'exploded'}).status_code == 400

    def test_newest_first(self, client_for, editor, busy_board):
        activities = client_for(editor).get('/api/activity/', {'limit': 100}).json()['activities']

        timestamps = [a['createdAt'] for a in activities]
        assert timestamps == sorted(timestamps, reverse=True)
        assert activities[-1]['type'] == Activity.BOARD_CREATED
