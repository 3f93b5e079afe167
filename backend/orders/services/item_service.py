from decimal import Decimal
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
import logging

from billing.money import to_decimal
from core_backend.exceptions import NotFound, OrderStateConflict, ValidationFailure
from floor_plan.models import Table
from menu.models import MenuItem
from notifications.services import broadcast_on_commit
from orders.models import Order, OrderItem
from orders.serializers import OrderItemSerializer
from orders.services.order_service import OrderService
from orders.services.status_rules import derive_table_status, parse_choice
from orders.signals import order_item_status_changed, send_best_effort

logger = logging.getLogger(__name__)


class OrderItemService:
    """Service for managing order items - adding, updating status, removing."""

    @staticmethod
    def get_item(item_id, for_update: bool = False) -> OrderItem:
        queryset = OrderItem.objects.select_for_update() if for_update else OrderItem.objects
        try:
            return queryset.get(pk=item_id)
        except (OrderItem.DoesNotExist, ValidationError, ValueError):
            raise NotFound("Order item", item_id)

    @staticmethod
    def get_menu_item(menu_item_id) -> MenuItem:
        if isinstance(menu_item_id, MenuItem):
            return menu_item_id
        try:
            return MenuItem.objects.get(pk=menu_item_id)
        except (MenuItem.DoesNotExist, ValueError, TypeError):
            raise NotFound("Menu item", menu_item_id)

    @staticmethod
    def create_item(
        order: Order,
        menu_item: Optional[MenuItem] = None,
        name: Optional[str] = None,
        price=None,
        quantity: int = 1,
        notes: str = "",
        is_veg: Optional[bool] = None,
        status: str = OrderItem.ItemStatus.NEW,
    ) -> OrderItem:
        """
        Insert one item row with its name/price/veg snapshot. Does not touch
        the order total or the table; callers decide when to recompute.
        """
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValidationFailure(f"'{quantity}' is not a valid quantity.")
        if quantity <= 0:
            raise ValidationFailure("Quantity must be a positive integer.")

        if menu_item is not None:
            name = name or menu_item.name
            price = menu_item.price if price is None else price
            if is_veg is None:
                is_veg = menu_item.is_veg
        if not name or price is None:
            raise ValidationFailure("An order item needs a name and a price.")

        price = to_decimal(price)
        if price < Decimal("0"):
            raise ValidationFailure("Item price cannot be negative.")

        return OrderItem.objects.create(
            order=order,
            menu_item=menu_item,
            name=name,
            price=price,
            quantity=quantity,
            status=parse_choice(status, OrderItem.ItemStatus, "item status"),
            is_veg=True if is_veg is None else bool(is_veg),
            notes=notes or "",
        )

    @staticmethod
    @transaction.atomic
    def add_item(
        order_id,
        menu_item=None,
        name: Optional[str] = None,
        price=None,
        quantity: int = 1,
        notes: str = "",
        is_veg: Optional[bool] = None,
    ) -> OrderItem:
        """
        Add an item to an order, recompute the order total and re-derive the
        table status.

        Raises:
            NotFound: Unknown order or menu item.
            OrderStateConflict: The order is already paid or completed.
            ValidationFailure: Bad quantity, or neither menu item nor name+price given.
        """
        order = OrderService.get_order(order_id, for_update=True)
        if order.is_finished:
            raise OrderStateConflict(
                order,
                order.status,
                message=f"Cannot add items to an order that is {order.status}.",
            )
        if menu_item is not None:
            menu_item = OrderItemService.get_menu_item(menu_item)

        item = OrderItemService.create_item(
            order,
            menu_item=menu_item,
            name=name,
            price=price,
            quantity=quantity,
            notes=notes,
            is_veg=is_veg,
        )
        OrderService.recalculate_total(order)
        logger.debug(f"Added {item.quantity} x {item.name} to order {order.id}; total {order.total}")

        table = OrderItemService.refresh_table_status(order)
        if table is not None:
            OrderService.broadcast_table(table)
        broadcast_on_commit(
            "order_item_added",
            {"order_id": str(order.id), "item": OrderItemSerializer(item).data},
        )
        return item

    @staticmethod
    def refresh_table_status(order: Order) -> Optional[Table]:
        """
        Re-derive the status of the order's table from its item statuses.
        Returns the table when a status was derived, else None.

        A finished order, or one whose table has since been given to another
        order, never touches the table.
        """
        if not order.table_id or order.is_finished:
            return None
        statuses = order.items.values_list("status", flat=True)
        derived = derive_table_status(statuses)
        if derived is None:
            return None
        table = Table.objects.select_for_update().get(pk=order.table_id)
        if table.current_order_id not in (None, order.id):
            logger.info(
                f"Table {table.number} now holds order {table.current_order_id}; "
                f"leaving its status alone for order {order.id}"
            )
            return None
        if table.status != derived:
            table.set_status(derived)
        return table

    @staticmethod
    @transaction.atomic
    def update_item_status(item_id, new_status: str) -> OrderItem:
        """
        Set one item's status, re-derive the table status and mirror the
        customer-facing status (best effort).
        """
        new_status = parse_choice(new_status, OrderItem.ItemStatus, "item status")
        item = OrderItemService.get_item(item_id, for_update=True)
        item.status = new_status
        item.save(update_fields=["status"])

        order = item.order
        table = OrderItemService.refresh_table_status(order)
        if table is not None:
            OrderService.broadcast_table(table)

        send_best_effort(order_item_status_changed, sender=OrderItem, order=order)
        broadcast_on_commit("order_item_updated", OrderItemSerializer(item).data)
        return item

    @staticmethod
    @transaction.atomic
    def update_order_items_status(order_id, new_status: str) -> List[OrderItem]:
        """
        Bulk form of update_item_status: every item whose status differs is
        updated, then the table status is derived once. Returns the changed items.
        """
        new_status = parse_choice(new_status, OrderItem.ItemStatus, "item status")
        order = OrderService.get_order(order_id)

        changed = []
        for item in order.items.select_for_update().exclude(status=new_status):
            item.status = new_status
            item.save(update_fields=["status"])
            changed.append(item)

        if not changed:
            return changed

        table = OrderItemService.refresh_table_status(order)
        if table is not None:
            OrderService.broadcast_table(table)

        send_best_effort(order_item_status_changed, sender=OrderItem, order=order)
        for item in changed:
            broadcast_on_commit("order_item_updated", OrderItemSerializer(item).data)
        logger.info(f"Set {len(changed)} item(s) of order {order.id} to {new_status}")
        return changed

    @staticmethod
    @transaction.atomic
    def delete_item(item_id) -> Order:
        """
        Remove an item and recompute the order total. The table status is
        intentionally not re-derived here.
        """
        item = OrderItemService.get_item(item_id, for_update=True)
        order = OrderService.get_order(item.order_id, for_update=True)
        deleted_id = str(item.id)
        item.delete()

        OrderService.recalculate_total(order)
        broadcast_on_commit(
            "order_item_deleted", {"id": deleted_id, "order_id": str(order.id)}
        )
        return order
