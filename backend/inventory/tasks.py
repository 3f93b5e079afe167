from celery import shared_task
import logging

from notifications.services import BroadcastService
from .services import InventoryService

logger = logging.getLogger(__name__)


@shared_task
def check_low_stock():
    """
    Periodic sweep for items at or below their minimum stock. Broadcasts one
    `inventory_low_stock` event listing them.
    """
    items = list(InventoryService.get_low_stock_items())
    if not items:
        logger.debug("Low stock sweep: nothing below threshold")
        return {"status": "completed", "low_stock_count": 0}

    payload = [
        {
            "id": item.id,
            "name": item.name,
            "current_stock": item.current_stock,
            "min_stock": item.min_stock,
            "unit": item.unit,
        }
        for item in items
    ]
    BroadcastService.broadcast("inventory_low_stock", {"items": payload})
    logger.info(f"Low stock sweep: {len(items)} item(s) at or below threshold")
    return {"status": "completed", "low_stock_count": len(items)}
