from .state import ReconciliationState
from .gateway import DigitalMenuGateway
from .customer_status import (
    guest_table_status,
    mirror_customer_table_status,
    sync_table_status_from_order,
)
from .conversion import DigitalMenuOrderConverter, build_item_notes
from .sync_service import (
    DigitalMenuSyncService,
    digital_menu_sync,
    item_status_for,
    is_invoice_generated,
)

__all__ = [
    "ReconciliationState",
    "DigitalMenuGateway",
    "guest_table_status",
    "mirror_customer_table_status",
    "sync_table_status_from_order",
    "DigitalMenuOrderConverter",
    "build_item_notes",
    "DigitalMenuSyncService",
    "digital_menu_sync",
    "item_status_for",
    "is_invoice_generated",
]
