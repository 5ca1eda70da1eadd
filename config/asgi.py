# config/asgi.py

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Sets Django up before anything imports models
django_asgi_app = get_asgi_application()

from channels.auth import AuthMiddlewareStack  # noqa: E402
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402
from django.conf import settings  # noqa: E402

from apps.board.routing import websocket_urlpatterns  # noqa: E402
from apps.core.bootstrap import initialize_database  # noqa: E402

# One-off schema setup before the first request is accepted
if settings.GROOVE_MIGRATE_ON_STARTUP and not initialize_database():
    raise RuntimeError("Database initialization failed, refusing to start")

application = ProtocolTypeRouter({
    # Plain HTTP
    "http": django_asgi_app,

    # Authenticated WebSockets
    "websocket": AllowedHostsOriginValidator(
        AuthMiddlewareStack(
            URLRouter(websocket_urlpatterns)
        )
    ),
})
