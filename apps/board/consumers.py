# apps/board/consumers.py

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

from apps.core.models import Board
from apps.core.permissions import BoardPermissions
from apps.core.utils import display_name

from .payloads import column_payload
from .realtime import board_group

logger = logging.getLogger(__name__)


class BoardConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer for live board updates

    Features:
    - Server-side changes (cards, columns, comments, members) pushed as events
    - Presence notifications (user joined / left)
    - sync_board: full snapshot with positions and revisions
    """

    async def connect(self):
        """
        Joins the board group
        Only board members are accepted
        """
        self.board_id = self.scope['url_route']['kwargs']['board_id']
        self.board_group_name = board_group(self.board_id)
        self.user = self.scope['user']

        if not self.user.is_authenticated:
            logger.warning("❌ WebSocket rejected - not authenticated")
            await self.close()
            return

        has_access = await self.check_board_access()
        if not has_access:
            logger.warning(f"❌ WebSocket rejected - {self.user.email} is not a member of board {self.board_id}")
            await self.close()
            return

        await self.channel_layer.group_add(self.board_group_name, self.channel_name)
        self.joined = True
        await self.accept()

        await self.channel_layer.group_send(
            self.board_group_name,
            {
                'type': 'presence',
                'event': 'user_joined',
                'message': self.presence_message(),
            }
        )

        logger.info(f"✅ WebSocket connected - {self.user.email} on board {self.board_id}")

    async def disconnect(self, close_code):
        if getattr(self, 'joined', False):
            await self.channel_layer.group_send(
                self.board_group_name,
                {
                    'type': 'presence',
                    'event': 'user_left',
                    'message': self.presence_message(),
                }
            )
            await self.channel_layer.group_discard(self.board_group_name, self.channel_name)

        logger.info(f"🔌 WebSocket disconnected from board {getattr(self, 'board_id', '?')} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Client messages: ping, sync_board
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ Invalid JSON over WebSocket from {self.user.email}")
            await self.send_json({'type': 'error', 'message': 'Invalid JSON'})
            return

        message_type = data.get('type') if isinstance(data, dict) else None

        if message_type == 'ping':
            await self.send_json({'type': 'pong', 'timestamp': self.get_timestamp()})

        elif message_type == 'sync_board':
            board_data = await self.get_board_state()
            if board_data is None:
                # Board deleted or membership revoked since connecting
                await self.close()
                return
            await self.send_json({
                'type': 'board_sync',
                'boardData': board_data,
                'timestamp': self.get_timestamp(),
            })

        else:
            await self.send_json({'type': 'error', 'message': f'Unknown message type: {message_type}'})

    # === Group event handlers ===

    async def board_event(self, event):
        """Server-side change published by apps.board.realtime.broadcast"""
        await self.send_json({
            'type': event['event'],
            'message': event['message'],
            'actorId': event.get('actor_id'),
            'timestamp': event.get('timestamp'),
        })

    async def presence(self, event):
        message = event['message']
        # Not echoed to the user who caused it
        if message['userId'] != self.user.pk:
            await self.send_json({'type': event['event'], 'message': message})

    # === Helpers ===

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    def presence_message(self):
        return {
            'user': display_name(self.user),
            'userId': self.user.pk,
            'timestamp': self.get_timestamp(),
        }

    @database_sync_to_async
    def check_board_access(self):
        try:
            board = Board.objects.get(pk=self.board_id)
        except Board.DoesNotExist:
            return False
        return BoardPermissions.is_member(self.user, board)

    @database_sync_to_async
    def get_board_state(self):
        """
        Snapshot of columns and cards for resynchronization
        None when the user lost access
        """
        try:
            board = Board.objects.get(pk=self.board_id)
        except Board.DoesNotExist:
            return None
        if not BoardPermissions.is_member(self.user, board):
            return None

        items_by_column = {}
        for item in board.items.select_related('assignee').order_by('position', 'pk'):
            items_by_column.setdefault(item.column_id, []).append(item)

        return {
            'boardId': board.pk,
            'name': board.name,
            'revision': board.revision,
            'columns': [
                column_payload(column, items_by_column.get(column.pk, []))
                for column in board.columns.order_by('position', 'pk')
            ],
        }

    def get_timestamp(self):
        return timezone.now().isoformat()
