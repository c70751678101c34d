import json
from channels.generic.websocket import AsyncWebsocketConsumer

from .signals import REVIEW_GROUP


class ReviewQueueConsumer(AsyncWebsocketConsumer):
    """Pushes submissions and review decisions to admins watching the queue."""

    async def connect(self):
        user = self.scope.get('user')
        if user is None or not user.is_authenticated or not user.is_admin:
            await self.close()
            return

        self.group_name = REVIEW_GROUP
        await self.channel_layer.group_add(
            self.group_name,
            self.channel_name
        )
        await self.accept()

    async def disconnect(self, close_code):
        if hasattr(self, 'group_name'):
            await self.channel_layer.group_discard(
                self.group_name,
                self.channel_name
            )

    async def review_update(self, event):
        data = event['data']
        await self.send(text_data=json.dumps(data))
