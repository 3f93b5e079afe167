from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone
import logging

from core_backend.exceptions import BusinessRuleConflict, NotFound, ValidationFailure
from inventory.models import (
    InventoryItem,
    PurchaseOrder,
    Recipe,
    StockHistoryEntry,
    Wastage,
)
from notifications.services import broadcast_on_commit

logger = logging.getLogger(__name__)


def _to_quantity(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationFailure(f"'{value}' is not a valid quantity.")


class InventoryService:
    """
    The three writers of ingredient stock: checkout deduction, wastage and
    purchase-order receipt. Every write locks the item row and appends a
    StockHistoryEntry.
    """

    @staticmethod
    def _log_stock_operation(
        item: InventoryItem,
        operation_type: str,
        quantity_change: Decimal,
        previous_quantity: Decimal,
        reference_id: str = "",
        notes: str = "",
    ):
        StockHistoryEntry.objects.create(
            inventory_item=item,
            operation_type=operation_type,
            quantity_change=quantity_change,
            previous_quantity=previous_quantity,
            new_quantity=item.current_stock,
            reference_id=reference_id,
            notes=notes,
        )

    @staticmethod
    def adjust_stock(
        inventory_item_id,
        delta: Decimal,
        operation_type: str,
        reference_id: str = "",
        notes: str = "",
        allow_negative: bool = True,
    ) -> InventoryItem:
        """
        Add `delta` (negative to subtract) to an item's stock under a row lock.

        Raises:
            NotFound: Unknown inventory item.
            ValidationFailure: The result would be negative and `allow_negative` is off.
        """
        try:
            item = InventoryItem.objects.select_for_update().get(pk=inventory_item_id)
        except (InventoryItem.DoesNotExist, ValueError, TypeError):
            raise NotFound("Inventory item", inventory_item_id)

        previous_quantity = item.current_stock
        new_quantity = previous_quantity + delta
        if new_quantity < 0 and not allow_negative:
            raise ValidationFailure(
                f"Insufficient stock for {item.name}. "
                f"Available: {previous_quantity}, requested: {-delta}",
                details={"available": str(previous_quantity)},
            )

        item.current_stock = new_quantity
        item.save(update_fields=["current_stock", "last_updated"])
        InventoryService._log_stock_operation(
            item, operation_type, delta, previous_quantity, reference_id, notes
        )
        return item

    @staticmethod
    def get_recipe_for_menu_item(menu_item_id) -> Optional[Recipe]:
        """Most recently created recipe of a menu item, or None."""
        if menu_item_id is None:
            return None
        return (
            Recipe.objects.filter(menu_item_id=menu_item_id)
            .order_by("-created_at", "-id")
            .prefetch_related("ingredients")
            .first()
        )

    @staticmethod
    @transaction.atomic
    def deduct_for_order(order) -> List[InventoryItem]:
        """
        Deduct recipe ingredients for every item of an order.

        For each order item the menu item's most recent recipe is used and each
        ingredient's stock drops by quantity-per-unit x item quantity. Stock is
        not floored at zero. Items without a recipe (or without a menu item)
        are skipped.
        """
        touched = []
        for order_item in order.items.all():
            recipe = InventoryService.get_recipe_for_menu_item(order_item.menu_item_id)
            if recipe is None:
                continue
            for ingredient in recipe.ingredients.all():
                delta = ingredient.quantity * order_item.quantity
                item = InventoryService.adjust_stock(
                    ingredient.inventory_item_id,
                    -delta,
                    StockHistoryEntry.Operation.ORDER_DEDUCTION,
                    reference_id=f"order_{order.id}",
                    notes=f"Recipe ingredient for {order_item.name}",
                )
                touched.append(item)

        logger.info(f"Deducted {len(touched)} ingredient line(s) for order {order.id}")
        return touched

    @staticmethod
    @transaction.atomic
    def record_wastage(
        inventory_item_id,
        quantity,
        unit: str,
        reason: str,
        reported_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Wastage:
        """
        Record spoiled or lost stock. Unlike checkout deduction, wastage may
        never take stock below zero.
        """
        quantity = _to_quantity(quantity)
        if quantity <= 0:
            raise ValidationFailure("Wastage quantity must be positive.")

        item = InventoryService.adjust_stock(
            inventory_item_id,
            -quantity,
            StockHistoryEntry.Operation.WASTAGE,
            notes=reason,
            allow_negative=False,
        )
        wastage = Wastage.objects.create(
            inventory_item=item,
            quantity=quantity,
            unit=unit,
            reason=reason,
            reported_by=reported_by,
            notes=notes,
        )
        logger.info(f"Recorded wastage of {quantity} {unit} {item.name}: {reason}")

        broadcast_on_commit(
            "wastage_created",
            {
                "id": wastage.id,
                "inventory_item_id": item.id,
                "quantity": quantity,
                "unit": unit,
                "reason": reason,
            },
        )
        broadcast_on_commit("inventory_updated", {"wastage_id": wastage.id})
        return wastage

    @staticmethod
    @transaction.atomic
    def receive_purchase_order(purchase_order_id) -> PurchaseOrder:
        """
        Add every line of a purchase order to stock and mark it received.

        Raises:
            NotFound: Unknown purchase order.
            BusinessRuleConflict: The purchase order was already received or was cancelled.
        """
        try:
            purchase_order = PurchaseOrder.objects.select_for_update().get(pk=purchase_order_id)
        except (PurchaseOrder.DoesNotExist, ValueError, TypeError):
            raise NotFound("Purchase order", purchase_order_id)

        if purchase_order.status in (
            PurchaseOrder.PurchaseOrderStatus.RECEIVED,
            PurchaseOrder.PurchaseOrderStatus.CANCELLED,
        ):
            raise BusinessRuleConflict(
                f"Purchase order {purchase_order.order_number} is already {purchase_order.status}.",
                details={"status": purchase_order.status},
            )

        for line in purchase_order.items.all():
            InventoryService.adjust_stock(
                line.inventory_item_id,
                line.quantity,
                StockHistoryEntry.Operation.PURCHASE_RECEIPT,
                reference_id=f"po_{purchase_order.order_number}",
            )

        purchase_order.status = PurchaseOrder.PurchaseOrderStatus.RECEIVED
        purchase_order.actual_delivery_date = timezone.now()
        purchase_order.save(update_fields=["status", "actual_delivery_date"])
        logger.info(f"Received purchase order {purchase_order.order_number}")

        broadcast_on_commit(
            "purchase_order_received",
            {"id": purchase_order.id, "order_number": purchase_order.order_number},
        )
        broadcast_on_commit("inventory_updated", {"purchase_order_id": purchase_order.id})
        return purchase_order

    @staticmethod
    def get_low_stock_items():
        return InventoryItem.objects.filter(current_stock__lte=F("min_stock"))
