"""
Broadcast notifier: fan-out of POS state changes to every connected client.

Events are hints to re-fetch, not authoritative data. Sends are fire and
forget: a missing channel layer or a failed send is logged and dropped.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any
import logging
import uuid

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

POS_UPDATES_GROUP = "pos_updates"


def serialize_payload(obj):
    """Recursively convert UUIDs, Decimals, and datetimes to JSON-serializable types."""
    if isinstance(obj, dict):
        return {str(k): serialize_payload(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [serialize_payload(item) for item in obj]
    elif isinstance(obj, uuid.UUID):
        return str(obj)
    elif isinstance(obj, Decimal):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, date):
        return obj.isoformat()
    return obj


class BroadcastService:
    """Sends `{"type": event, "data": payload}` to the POS updates group."""

    @staticmethod
    def broadcast(event: str, payload: Any = None):
        channel_layer = get_channel_layer()
        if not channel_layer:
            logger.warning(f"Channel layer not available. Dropping '{event}' broadcast.")
            return

        try:
            async_to_sync(channel_layer.group_send)(
                POS_UPDATES_GROUP,
                {
                    "type": "pos.update",
                    "event": event,
                    "data": serialize_payload(payload),
                },
            )
            logger.debug(f"Broadcast '{event}' to {POS_UPDATES_GROUP}")
        except Exception as e:
            logger.error(f"Error broadcasting '{event}': {e}")

    @staticmethod
    def broadcast_on_commit(event: str, payload: Any = None):
        """
        Queue a broadcast for after the current transaction commits. The
        payload is serialized now, so it reflects state at call time.
        """
        data = serialize_payload(payload)
        transaction.on_commit(lambda: BroadcastService.broadcast(event, data))


broadcast = BroadcastService.broadcast
broadcast_on_commit = BroadcastService.broadcast_on_commit
