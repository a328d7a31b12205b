"""
WebSocket routing configuration for the hostel outing system.
"""

from django.urls import path

from apps.communication.consumers import LiveUpdatesConsumer

# Define WebSocket URL patterns
websocket_urlpatterns = [
    # Dashboards subscribe to one topic each: rooms, outing_requests, complaints
    path('ws/live/<str:topic>/', LiveUpdatesConsumer.as_asgi()),
]
