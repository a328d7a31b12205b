import json
from channels.generic.websocket import AsyncWebsocketConsumer

from .broadcast import LIVE_TOPICS, group_name_for


class LiveUpdatesConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer that tells a dashboard when its data changed.
    Clients re-fetch the affected view on every event.
    """

    async def connect(self):
        """Handle WebSocket connection."""
        self.user = self.scope.get('user')
        self.topic = self.scope['url_route']['kwargs'].get('topic')

        # Check if user is authenticated
        if self.user is None or not self.user.is_authenticated:
            await self.close()
            return

        if self.topic not in LIVE_TOPICS:
            await self.close()
            return

        self.group_name = group_name_for(self.topic)
        await self.channel_layer.group_add(
            self.group_name,
            self.channel_name
        )

        await self.accept()

    async def disconnect(self, close_code):
        """Handle WebSocket disconnection."""
        if hasattr(self, 'group_name'):
            await self.channel_layer.group_discard(
                self.group_name,
                self.channel_name
            )

    async def receive(self, text_data=None, bytes_data=None):
        """Only pings are accepted from clients."""
        try:
            data = json.loads(text_data or '{}')
        except json.JSONDecodeError:
            await self.send(text_data=json.dumps({
                'type': 'error',
                'message': 'Invalid JSON format'
            }))
            return

        if data.get('type') == 'ping':
            await self.send(text_data=json.dumps({'type': 'pong'}))

    # Event handlers for group messages
    async def live_change(self, event):
        """Forward a change event to the WebSocket."""
        await self.send(text_data=json.dumps({
            'type': 'change',
            'topic': event['topic'],
            'action': event['action'],
            'id': event['id'],
            'sent_at': event['sent_at'],
        }))
