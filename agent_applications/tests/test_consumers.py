from asgiref.sync import sync_to_async
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, override_settings

from accounts.models import Role, User
from agent_applications.consumers import ReviewQueueConsumer
from agent_applications.signals import broadcast

IN_MEMORY_LAYER = {'default': {'BACKEND': 'channels.layers.InMemoryChannelLayer'}}


@override_settings(CHANNEL_LAYERS=IN_MEMORY_LAYER)
class ReviewQueueConsumerTests(SimpleTestCase):
    # channels closes stale DB connections on every dispatch
    databases = {'default'}

    def communicator(self, user):
        communicator = WebsocketCommunicator(ReviewQueueConsumer.as_asgi(), '/ws/admin/agent-applications/')
        communicator.scope['user'] = user
        return communicator

    async def test_admin_receives_review_events(self):
        communicator = self.communicator(User(email='admin@test.com', role=Role.ADMIN))
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await sync_to_async(broadcast)({'type': 'application_submitted', 'application_id': 7})

        event = await communicator.receive_json_from()
        self.assertEqual(event, {'type': 'application_submitted', 'application_id': 7})
        await communicator.disconnect()

    async def test_non_admin_is_refused(self):
        for user in (AnonymousUser(), User(email='student@test.com', role=Role.USER)):
            communicator = self.communicator(user)
            connected, _ = await communicator.connect()
            self.assertFalse(connected)
