# tests/test_broadcast.py

"""Live update publishing happens after commit and never breaks a write."""

import logging

import pytest

from apps.board import realtime, services
from apps.board.reorder import StaleOrder

pytestmark = pytest.mark.django_db


class RecordingLayer:
    """Channel layer double that keeps what was sent."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def group_send(self, group, message):
        if self.fail:
            raise RuntimeError('redis is down')
        self.sent.append((group, message))


@pytest.fixture
def layer(monkeypatch):
    layer = RecordingLayer()
    monkeypatch.setattr(realtime, 'get_channel_layer', lambda: layer)
    return layer


class TestBroadcast:

    def test_move_is_published_after_commit(self, owner, board, columns, make_item, layer,
                                            django_capture_on_commit_callbacks):
        item = make_item(columns['Not Now'], 'moving')

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            services.move_item(owner, item, columns['Done'].pk)

        assert len(callbacks) == 1
        group, message = layer.sent[0]
        assert group == f'board_{board.pk}'
        assert message['type'] == 'board_event'
        assert message['event'] == 'item_moved'
        assert message['actor_id'] == owner.pk
        assert message['message']['containerId'] == columns['Done'].pk
        assert message['message']['previousContainerId'] == columns['Not Now'].pk

    def test_failed_move_publishes_nothing(self, owner, columns, make_item, layer,
                                           django_capture_on_commit_callbacks):
        item = make_item(columns['Not Now'], 'moving')

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(StaleOrder):
                services.move_item(owner, item, columns['Done'].pk, expected_revision=99)

        assert callbacks == []
        assert layer.sent == []

    def test_nothing_is_sent_before_commit(self, owner, columns, make_item, layer,
                                           django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            make_item(columns['Done'], 'pending')

        assert len(callbacks) == 1
        assert layer.sent == []

    def test_layer_failure_is_logged(self, monkeypatch, owner, board, caplog,
                                     django_capture_on_commit_callbacks):
        monkeypatch.setattr(realtime, 'get_channel_layer', lambda: RecordingLayer(fail=True))

        with caplog.at_level(logging.WARNING, logger='apps.board.realtime'):
            with django_capture_on_commit_callbacks(execute=True):
                services.update_board(owner, board, {'name': 'Still saved'})

        board.refresh_from_db()
        assert board.name == 'Still saved'
        assert 'Broadcast of board_updated' in caplog.text
