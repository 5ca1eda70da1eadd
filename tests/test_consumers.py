# tests/test_consumers.py

"""BoardConsumer over an in-memory channel layer."""

import pytest
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from apps.board import services
from apps.board.realtime import board_group
from apps.board.routing import websocket_urlpatterns

pytestmark = pytest.mark.django_db(transaction=True)


async def connect(board_id, user):
    communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), f'/ws/board/{board_id}/')
    communicator.scope['user'] = user
    connected, _ = await communicator.connect()
    return communicator, connected


class TestConnection:

    async def test_member_connects_and_pings(self, editor, board):
        communicator, connected = await connect(board.pk, editor)
        assert connected

        await communicator.send_json_to({'type': 'ping'})
        response = await communicator.receive_json_from()

        assert response['type'] == 'pong'
        await communicator.disconnect()

    async def test_outsider_is_rejected(self, outsider, board):
        communicator, connected = await connect(board.pk, outsider)

        assert not connected

    async def test_anonymous_is_rejected(self, board):
        communicator, connected = await connect(board.pk, AnonymousUser())

        assert not connected

    async def test_unknown_message_type(self, editor, board):
        communicator, _ = await connect(board.pk, editor)

        await communicator.send_json_to({'type': 'dance'})
        response = await communicator.receive_json_from()

        assert response == {'type': 'error', 'message': 'Unknown message type: dance'}
        await communicator.disconnect()

    async def test_invalid_json(self, editor, board):
        communicator, _ = await connect(board.pk, editor)

        await communicator.send_to(text_data='{not json')
        response = await communicator.receive_json_from()

        assert response['type'] == 'error'
        await communicator.disconnect()


class TestBoardSync:

    async def test_snapshot_has_ordered_columns_and_cards(self, owner, editor, board, columns):
        column = columns['May be?']
        for title in ('first', 'second'):
            await database_sync_to_async(services.create_item)(owner, board, column.pk, title)

        communicator, _ = await connect(board.pk, editor)
        await communicator.send_json_to({'type': 'sync_board'})
        response = await communicator.receive_json_from()

        assert response['type'] == 'board_sync'
        data = response['boardData']
        assert data['boardId'] == board.pk
        assert [c['name'] for c in data['columns']] == ['Not Now', 'May be?', 'Done']
        maybe = data['columns'][1]
        assert [item['title'] for item in maybe['items']] == ['first', 'second']
        assert maybe['revision'] == 2
        await communicator.disconnect()


class TestGroupEvents:

    async def test_board_events_are_forwarded(self, owner, editor, board):
        communicator, _ = await connect(board.pk, editor)

        await get_channel_layer().group_send(board_group(board.pk), {
            'type': 'board_event',
            'event': 'item_moved',
            'message': {'id': 'abcd-efgh', 'containerId': 'wxyz-2345'},
            'actor_id': owner.pk,
            'timestamp': '2026-01-01T00:00:00+00:00',
        })
        response = await communicator.receive_json_from()

        assert response == {
            'type': 'item_moved',
            'message': {'id': 'abcd-efgh', 'containerId': 'wxyz-2345'},
            'actorId': owner.pk,
            'timestamp': '2026-01-01T00:00:00+00:00',
        }
        await communicator.disconnect()

    async def test_presence_reaches_other_members_only(self, owner, editor, board):
        watching, _ = await connect(board.pk, owner)
        joining, _ = await connect(board.pk, editor)

        joined = await watching.receive_json_from()
        assert joined['type'] == 'user_joined'
        assert joined['message']['userId'] == editor.pk
        assert joined['message']['user'] == 'Eddie Editor'
        assert await joining.receive_nothing()

        await joining.disconnect()
        left = await watching.receive_json_from()
        assert left['type'] == 'user_left'

        await watching.disconnect()
