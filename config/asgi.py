"""
ASGI config for the hostel outing system.

It exposes the ASGI callable as a module-level variable named ``application``.
"""

import os
import django
from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.development')
django.setup()

from channels.routing import ProtocolTypeRouter, URLRouter
from channels.auth import AuthMiddlewareStack

# Import routing configuration
from config.routing import websocket_urlpatterns

# Application definition
application = ProtocolTypeRouter({
    # Django's ASGI application for HTTP requests
    'http': get_asgi_application(),

    # WebSocket connections with authentication
    'websocket': AuthMiddlewareStack(
        URLRouter(websocket_urlpatterns)
    ),
})
