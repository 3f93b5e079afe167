"""
Conversion of one external digital-menu order into a native POS order.
"""
from decimal import Decimal
from typing import Optional
import logging

from django.db import transaction
from django.utils import timezone

from billing.money import amounts_match, quantize, subtotal_of, to_decimal
from core_backend.exceptions import ValidationFailure
from digital_menu.services.customer_status import mirror_customer_table_status
from digital_menu.services.gateway import DigitalMenuGateway
from floor_plan.models import Table
from menu.models import MenuItem
from notifications.services import broadcast_on_commit
from orders.models import Order
from orders.serializers import OrderItemSerializer, OrderSerializer
from orders.services import OrderItemService, OrderService

logger = logging.getLogger(__name__)

PAID = "paid"
NOTES_SEPARATOR = " | "
UNKNOWN_ITEM_NAME = "Unknown item"


def build_item_notes(line: dict) -> str:
    """Join the guest's notes and the spice level, e.g. 'no onion | Spice: hot'."""
    parts = []
    if line.get("notes"):
        parts.append(str(line["notes"]))
    if line.get("spiceLevel"):
        parts.append(f"Spice: {line['spiceLevel']}")
    return NOTES_SEPARATOR.join(parts)


def line_quantity(line: dict) -> int:
    """Quantity of a guest cart line; a missing key means one, junk means zero."""
    try:
        return int(line.get("quantity", 1))
    except (TypeError, ValueError, OverflowError):
        return 0


def line_price(line: dict, order: Order) -> Decimal:
    raw = line.get("price") or 0
    try:
        price = to_decimal(raw)
    except ValidationFailure:
        price = None
    if price is None or not price.is_finite() or price < 0:
        logger.warning(f"Digital menu price {raw!r} on order {order.id} is not usable; using 0")
        return Decimal("0")
    return price


class DigitalMenuOrderConverter:
    """Builds a dine-in POS order, its items and its table link from an external order."""

    def __init__(self, gateway: Optional[DigitalMenuGateway] = None):
        self.gateway = gateway or DigitalMenuGateway()

    @transaction.atomic
    def convert(self, document, external: dict) -> Order:
        table = self.resolve_table(external)
        paid = external.get("paymentStatus") == PAID

        order = Order.objects.create(
            order_type=Order.OrderType.DINE_IN,
            status=Order.OrderStatus.BILLED if paid else Order.OrderStatus.SENT_TO_KITCHEN,
            table=table,
            customer_name=document.customer_name or "",
            customer_phone=document.customer_phone or "",
            payment_mode=external.get("paymentMethod") or "",
            billed_at=timezone.now() if paid else None,
        )
        broadcast_on_commit("order_created", OrderSerializer(order).data)

        if table is not None:
            self.link_table(table, order)

        for line in external.get("items") or []:
            self.add_line(order, line)

        self.apply_external_total(order, external)

        if order.customer_phone:
            mirror_customer_table_status(
                order.customer_phone, Table.TableStatus.OCCUPIED, gateway=self.gateway
            )

        logger.info(
            f"Created POS order {order.id} ({order.status}) for digital menu customer "
            f"{order.customer_name or order.customer_phone}"
        )
        return order

    def resolve_table(self, external: dict) -> Optional[Table]:
        table_number = external.get("tableNumber")
        if table_number in (None, ""):
            return None
        table = self.gateway.find_table(table_number, external.get("floorNumber"))
        if table is None:
            logger.warning(
                f"Table {table_number} (floor {external.get('floorNumber') or '-'}) not found; "
                f"creating the order without a table"
            )
        return table

    @staticmethod
    def link_table(table: Table, order: Order):
        table = Table.objects.select_for_update().get(pk=table.pk)
        table.current_order = order
        if table.status == Table.TableStatus.FREE:
            table.status = Table.TableStatus.OCCUPIED
        table.save(update_fields=["current_order", "status"])
        OrderService.broadcast_table(table)

    @staticmethod
    def add_line(order: Order, line: dict):
        """
        Add one guest cart line. Lines without a usable quantity are skipped;
        a missing name or a bad price is replaced so the rest of the order
        still reaches the kitchen.
        """
        name = str(line.get("menuItemName") or "").strip()
        quantity = line_quantity(line)
        if quantity <= 0:
            logger.warning(
                f"Skipping '{name or UNKNOWN_ITEM_NAME}' on order {order.id}: "
                f"quantity {line.get('quantity')!r} is not positive"
            )
            return None

        menu_item = MenuItem.objects.by_name(name).first() if name else None
        if not name:
            logger.warning(f"Digital menu line on order {order.id} has no item name")
        elif menu_item is None:
            logger.warning(f"Menu item '{name}' not found; adding it without a menu link")

        item = OrderItemService.create_item(
            order,
            menu_item=menu_item,
            name=name or UNKNOWN_ITEM_NAME,
            price=line_price(line, order),
            quantity=quantity,
            notes=build_item_notes(line),
            is_veg=menu_item.is_veg if menu_item else True,
        )
        broadcast_on_commit(
            "order_item_added",
            {"order_id": str(order.id), "item": OrderItemSerializer(item).data},
        )
        return item

    @staticmethod
    def apply_external_total(order: Order, external: dict):
        """
        The order total is the external total as given. A disagreement with
        the item subtotal plus the external tax is only logged.
        """
        external_total = quantize(external.get("total") or 0)
        computed = quantize(subtotal_of(order.items.all()) + quantize(external.get("tax") or 0))
        if not amounts_match(external_total, computed):
            logger.warning(
                f"Digital menu total {external_total} for order {order.id} does not match "
                f"items plus tax ({computed})"
            )
        order.total = external_total
        order.save(update_fields=["total", "updated_at"])
