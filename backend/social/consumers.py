from __future__ import annotations

from typing import Any, Dict

from channels.generic.websocket import AsyncJsonWebsocketConsumer

FEED_GROUP = "feed"


class FeedConsumer(AsyncJsonWebsocketConsumer):
    """Live feed socket shared by every connected client.

    Server pushes:
    - post_created: {"type", "post_id", "username"}
    - post_deleted: {"type", "post_id", "username"}

    Client can send:
    - {"type": "ping"} -> {"type": "pong"}
    """

    async def connect(self) -> None:
        await self.channel_layer.group_add(FEED_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code: int) -> None:
        await self.channel_layer.group_discard(FEED_GROUP, self.channel_name)

    async def receive_json(self, content: Dict[str, Any], **kwargs: Any) -> None:
        if content.get("type") == "ping":
            await self.send_json({"type": "pong"})

    async def notify(self, event: Dict[str, Any]) -> None:
        payload = event.get("payload")
        if payload is not None:
            await self.send_json(payload)
