# apps/communication/tests.py

from unittest import mock

from asgiref.sync import sync_to_async
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.core import mail
from django.test import SimpleTestCase, TestCase

from apps.hostels.models import Room
from apps.users.models import User
from config.routing import websocket_urlpatterns
from .broadcast import send_change, group_name_for
from .services import EmailService


def live_communicator(topic, user):
    communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), f'/ws/live/{topic}/')
    communicator.scope['user'] = user
    return communicator


class LiveUpdatesConsumerTestCase(SimpleTestCase):
    """WebSocket subscriptions for dashboard refreshes"""

    async def test_change_event_reaches_subscriber(self):
        communicator = live_communicator('rooms', User(email='warden@example.com'))
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await sync_to_async(send_change)('rooms', 'updated', 'room-1')
        event = await communicator.receive_json_from()

        self.assertEqual(event['type'], 'change')
        self.assertEqual(event['topic'], 'rooms')
        self.assertEqual(event['action'], 'updated')
        self.assertEqual(event['id'], 'room-1')
        await communicator.disconnect()

    async def test_ping(self):
        communicator = live_communicator('complaints', User(email='warden@example.com'))
        await communicator.connect()

        await communicator.send_json_to({'type': 'ping'})
        self.assertEqual(await communicator.receive_json_from(), {'type': 'pong'})
        await communicator.disconnect()

    async def test_anonymous_user_is_refused(self):
        communicator = live_communicator('rooms', AnonymousUser())
        connected, _ = await communicator.connect()
        self.assertFalse(connected)

    async def test_unknown_topic_is_refused(self):
        communicator = live_communicator('grades', User(email='warden@example.com'))
        connected, _ = await communicator.connect()
        self.assertFalse(connected)


class BroadcastTestCase(TestCase):

    def test_unknown_topic(self):
        with self.assertRaises(ValueError):
            send_change('grades', 'updated', 'x')

    def test_group_names(self):
        self.assertEqual(group_name_for('outing_requests'), 'live_outing_requests')

    def test_broadcast_waits_for_commit(self):
        with mock.patch('apps.communication.broadcast.send_change') as send:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                room = Room.objects.create(room_number='101', floor=1)
                send.assert_not_called()

        self.assertEqual(len(callbacks), 1)
        send.assert_called_once_with('rooms', 'created', room.pk)


class EmailServiceTestCase(TestCase):

    def test_send_email(self):
        success, message = EmailService.send_email(
            'asha@example.com', 'Hello', '<p>Hello <strong>Asha</strong></p>'
        )

        self.assertTrue(success)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].body, 'Hello Asha')
        self.assertEqual(mail.outbox[0].alternatives[0][1], 'text/html')

    def test_missing_recipient(self):
        success, message = EmailService.send_email('', 'Hello', '<p>Hello</p>')
        self.assertFalse(success)
        self.assertEqual(len(mail.outbox), 0)

    def test_missing_template(self):
        success, message = EmailService.send_templated_email(
            'outings/emails/does_not_exist', 'asha@example.com', 'Hello', {}
        )
        self.assertFalse(success)
        self.assertIn('does_not_exist', message)
