from celery import shared_task
import logging

from digital_menu.services import digital_menu_sync

logger = logging.getLogger(__name__)


@shared_task
def sync_digital_menu_orders():
    """
    One reconciliation tick, for deployments that poll from Celery beat
    instead of the in-process thread.
    """
    if digital_menu_sync.is_running:
        logger.debug("In-process digital menu sync is running; beat tick skipped")
        return {"status": "skipped", "changed": 0}

    changed = digital_menu_sync.sync_orders()
    return {"status": "completed", "changed": changed}
