import json

from channels.generic.websocket import AsyncWebsocketConsumer

from hms.services.revalidate import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Push ``broadcast.refresh`` events to signed-in staff."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        user = self.scope.get("user")
        if not (user and user.is_authenticated):
            await self.close(code=4001)
            return
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def broadcast_refresh(self, event):
        # event: {"type": "broadcast.refresh", "version": int, "ts": "...", "keys": [...]}
        await self.send(json.dumps(event))
