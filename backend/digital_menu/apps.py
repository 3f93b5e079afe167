import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class DigitalMenuConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "digital_menu"

    def ready(self):
        """Register the customer-status receivers and optionally start polling."""
        import digital_menu.signals  # noqa: F401

        if getattr(settings, "DIGITAL_MENU_SYNC_AUTOSTART", False):
            from digital_menu.services import digital_menu_sync

            logger.info("DIGITAL_MENU_SYNC_AUTOSTART is on; starting digital menu sync")
            digital_menu_sync.start(settings.DIGITAL_MENU_SYNC_INTERVAL_MS)
