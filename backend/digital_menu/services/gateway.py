"""
Read/write access to the external digital-menu documents.

The synchronizer goes through this class for everything it touches on the
external side, so tests can hand it a stub.
"""
from typing import List, Optional
import logging

from django.db import transaction
from django.db.models.functions import Lower
from django.utils import timezone

from core_backend.exceptions import ExternalSyncError
from digital_menu.models import DigitalMenuCustomer, DigitalMenuCustomerOrders
from floor_plan.models import Table

logger = logging.getLogger(__name__)

LOGGED_IN = "loggedin"


class DigitalMenuGateway:

    def customer_documents(self) -> List[DigitalMenuCustomerOrders]:
        """Snapshot of every customer document that carries at least one order."""
        return [
            document
            for document in DigitalMenuCustomerOrders.objects.order_by("created_at", "id")
            if document.embedded_orders()
        ]

    @staticmethod
    def synthetic_id(document, external: dict) -> str:
        """The embedded order's `_id`, or `<documentId>_<orderDate>` when it has none."""
        if external.get("_id"):
            return str(external["_id"])
        return f"{document.pk}_{external.get('orderDate')}"

    def mark_synced(self, document_id, order_ref: str, pos_order_id):
        """
        Write `syncedToPOS`, `syncedAt` and `posOrderId` on the embedded order
        identified by `order_ref`.

        Raises:
            ExternalSyncError: The document or the embedded order is gone.
        """
        with transaction.atomic():
            try:
                document = DigitalMenuCustomerOrders.objects.select_for_update().get(pk=document_id)
            except DigitalMenuCustomerOrders.DoesNotExist:
                raise ExternalSyncError(f"Digital menu document {document_id} no longer exists")

            for external in document.embedded_orders():
                if self.synthetic_id(document, external) == order_ref:
                    external["syncedToPOS"] = True
                    external["syncedAt"] = timezone.now().isoformat()
                    external["posOrderId"] = str(pos_order_id)
                    document.save(update_fields=["orders", "updated_at"])
                    return
        raise ExternalSyncError(
            f"Order {order_ref} not found in digital menu document {document_id}"
        )

    def find_table(self, table_number, floor_name: Optional[str] = None) -> Optional[Table]:
        """
        Resolve a table by number, narrowed to a floor when `floor_name`
        matches one (case-insensitive). Falls back to the first table with
        that number on any floor.
        """
        tables = Table.objects.select_related("floor").filter(number=str(table_number).strip())

        if floor_name:
            on_floor = tables.filter(floor__name__iexact=str(floor_name).strip())
            if on_floor.exists():
                return on_floor.order_by("id").first()
            logger.warning(
                f"Floor '{floor_name}' has no table {table_number}; searching all floors"
            )

        matches = list(tables.order_by("id")[:2])
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                f"Table {table_number} exists on several floors; using the one on "
                f"{matches[0].floor.name if matches[0].floor else 'no floor'}"
            )
        return matches[0]

    def set_customer_table_status(self, phone: str, status: str) -> int:
        return DigitalMenuCustomer.objects.filter(phone_number=phone).update(
            table_status=status, updated_at=timezone.now()
        )

    def list_order_documents(self):
        return DigitalMenuCustomerOrders.objects.order_by("-created_at", "-id")

    def list_logged_in_customers(self):
        return DigitalMenuCustomer.objects.filter(login_status=LOGGED_IN).order_by(
            Lower("name"), "id"
        )
