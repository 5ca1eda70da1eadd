# apps/board/realtime.py

"""
Live updates for connected board clients

Events are published to the `board_<id>` group only after the surrounding
transaction commits, so clients never see a change that was rolled back.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


def board_group(board_id):
    return f'board_{board_id}'


def broadcast(board_id, event, message, actor=None):
    """
    Publishes `event` with `message` to everyone watching the board

    Ex: broadcast(board.pk, 'item_moved', {...}, actor=request.user)
    """
    payload = {
        'type': 'board_event',
        'event': event,
        'message': message,
        'actor_id': getattr(actor, 'pk', None),
        'timestamp': timezone.now().isoformat(),
    }

    def send():
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return
        try:
            async_to_sync(channel_layer.group_send)(board_group(board_id), payload)
        except Exception as e:
            # The write already committed; clients catch up on their next sync
            logger.warning(f"⚠️ Broadcast of {event} to board {board_id} failed: {e}")

    transaction.on_commit(send)
