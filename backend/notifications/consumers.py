import json
import logging
from datetime import datetime

from channels.generic.websocket import AsyncWebsocketConsumer

from .services import POS_UPDATES_GROUP

logger = logging.getLogger(__name__)


class POSUpdatesConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer for POS-wide state change events. Every connected
    client (waiter tablet, kitchen display, cashier) joins the same group.
    """

    async def connect(self):
        await self.channel_layer.group_add(POS_UPDATES_GROUP, self.channel_name)
        await self.accept()
        logger.info(f"POS client connected ({self.channel_name})")

        await self.send(
            text_data=json.dumps(
                {
                    "type": "connection_established",
                    "timestamp": self.get_timestamp(),
                }
            )
        )

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(POS_UPDATES_GROUP, self.channel_name)
        logger.info(f"POS client disconnected ({self.channel_name}), code={close_code}")

    async def receive(self, text_data=None, bytes_data=None):
        """Only `ping` is meaningful from clients; everything else is ignored."""
        try:
            data = json.loads(text_data or "{}")
        except json.JSONDecodeError:
            logger.warning("Invalid JSON received from POS client")
            return

        if isinstance(data, dict) and data.get("type") == "ping":
            await self.send(
                text_data=json.dumps({"type": "pong", "timestamp": self.get_timestamp()})
            )
        else:
            logger.debug("Ignoring unsupported client message")

    async def pos_update(self, event):
        """Forward a broadcast event to the client."""
        await self.send(text_data=json.dumps({"type": event["event"], "data": event["data"]}))

    def get_timestamp(self):
        return datetime.now().isoformat()
