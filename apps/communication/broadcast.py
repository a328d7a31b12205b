"""
Push "something changed" events to open dashboards over the channel layer.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)

LIVE_TOPICS = ('rooms', 'outing_requests', 'complaints')


def group_name_for(topic):
    return f'live_{topic}'


def send_change(topic, action, pk):
    """Send a change event to every consumer subscribed to ``topic``."""
    if topic not in LIVE_TOPICS:
        raise ValueError(f"Unknown live topic: {topic}")

    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            group_name_for(topic),
            {
                'type': 'live.change',
                'topic': topic,
                'action': action,
                'id': str(pk),
                'sent_at': timezone.now().isoformat(),
            }
        )
    except Exception as e:
        # Broadcast failures never fail the write that triggered them
        logger.error(f"Failed to broadcast {topic} {action} for {pk}: {e}")


def notify_change(topic, action, pk):
    """
    Broadcast once the current transaction commits, so listeners never
    re-fetch data that is not visible yet.
    """
    transaction.on_commit(lambda: send_change(topic, action, pk))
