# apps/board/routing.py

from django.urls import re_path
from . import consumers

# WebSocket routes of the board app
websocket_urlpatterns = [
    # Live updates of one board
    re_path(r'ws/board/(?P<board_id>[2-9a-z]{4}-[2-9a-z]{4})/$', consumers.BoardConsumer.as_asgi()),
]
