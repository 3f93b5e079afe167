"""
Stock writer tests: recipe deduction at checkout, wastage and purchase-order
receipt, each with its audit trail.
"""
from decimal import Decimal

import pytest
from django.utils import timezone

from billing.services import BillingService
from core_backend.exceptions import BusinessRuleConflict, NotFound, ValidationFailure
from inventory.models import (
    InventoryItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Recipe,
    RecipeIngredient,
    StockHistoryEntry,
    Supplier,
)
from inventory.services import InventoryService
from inventory.tasks import check_low_stock
from orders.services import OrderItemService, OrderService


@pytest.fixture
def paneer_stock():
    return InventoryItem.objects.create(
        name="Paneer", unit="g", current_stock=Decimal("1000"), min_stock=Decimal("200")
    )


@pytest.fixture
def tikka_recipe(paneer_tikka, paneer_stock):
    recipe = Recipe.objects.create(menu_item=paneer_tikka)
    RecipeIngredient.objects.create(
        recipe=recipe, inventory_item=paneer_stock, quantity=Decimal("150"), unit="g"
    )
    return recipe


@pytest.fixture
def supplier():
    return Supplier.objects.create(name="Fresh Farms", phone="080-1234")


@pytest.mark.django_db
class TestRecipeDeduction:

    def test_deduction_is_quantity_per_unit_times_item_quantity(
        self, order_with_items, tikka_recipe, paneer_stock
    ):
        """
        Scenario:
        - Recipe uses 150 g paneer per Paneer Tikka, order has 2
        - Expected: 300 g deducted at checkout, one history entry
        """
        BillingService.checkout(order_with_items.id)

        paneer_stock.refresh_from_db()
        assert paneer_stock.current_stock == Decimal("700")
        entry = StockHistoryEntry.objects.get(inventory_item=paneer_stock)
        assert entry.operation_type == StockHistoryEntry.Operation.ORDER_DEDUCTION
        assert entry.quantity_change == Decimal("-300")
        assert entry.previous_quantity == Decimal("1000")
        assert entry.new_quantity == Decimal("700")
        assert entry.reference_id == f"order_{order_with_items.id}"

    def test_most_recent_recipe_wins(self, order_with_items, tikka_recipe, paneer_tikka, paneer_stock):
        newer = Recipe.objects.create(menu_item=paneer_tikka)
        RecipeIngredient.objects.create(
            recipe=newer, inventory_item=paneer_stock, quantity=Decimal("100"), unit="g"
        )

        InventoryService.deduct_for_order(order_with_items)

        paneer_stock.refresh_from_db()
        assert paneer_stock.current_stock == Decimal("800")

    def test_stock_may_go_negative(self, order_with_items, tikka_recipe, paneer_stock):
        InventoryItem.objects.filter(pk=paneer_stock.pk).update(current_stock=Decimal("100"))

        InventoryService.deduct_for_order(order_with_items)

        paneer_stock.refresh_from_db()
        assert paneer_stock.current_stock == Decimal("-200")

    def test_items_without_recipe_or_menu_item_are_skipped(self, dine_in_order, paneer_stock):
        OrderItemService.add_item(dine_in_order.id, name="Open Item", price="50.00")

        touched = InventoryService.deduct_for_order(dine_in_order)

        assert touched == []
        assert StockHistoryEntry.objects.count() == 0


@pytest.mark.django_db
class TestWastage:

    def test_wastage_reduces_stock_once(self, paneer_stock, django_capture_on_commit_callbacks, event_names):
        with django_capture_on_commit_callbacks(execute=True):
            wastage = InventoryService.record_wastage(
                paneer_stock.id, "250", unit="g", reason="Spoiled", reported_by="Chef"
            )

        paneer_stock.refresh_from_db()
        assert paneer_stock.current_stock == Decimal("750")
        assert wastage.quantity == Decimal("250")
        assert StockHistoryEntry.objects.filter(
            operation_type=StockHistoryEntry.Operation.WASTAGE
        ).count() == 1
        assert event_names() == ["wastage_created", "inventory_updated"]

    def test_wastage_beyond_stock_is_rejected(self, paneer_stock):
        with pytest.raises(ValidationFailure) as exc_info:
            InventoryService.record_wastage(paneer_stock.id, "1500", unit="g", reason="Dropped")

        assert exc_info.value.details == {"available": "1000.000"}
        paneer_stock.refresh_from_db()
        assert paneer_stock.current_stock == Decimal("1000")

    @pytest.mark.parametrize("quantity", ["0", "-5", "lots"])
    def test_non_positive_or_garbage_quantity_is_rejected(self, paneer_stock, quantity):
        with pytest.raises(ValidationFailure):
            InventoryService.record_wastage(paneer_stock.id, quantity, unit="g", reason="?")

    def test_unknown_item(self):
        with pytest.raises(NotFound):
            InventoryService.record_wastage(999, "1", unit="g", reason="?")


@pytest.mark.django_db
class TestPurchaseOrderReceipt:

    @pytest.fixture
    def purchase_order(self, supplier, paneer_stock):
        purchase_order = PurchaseOrder.objects.create(
            order_number="PO-1001", supplier=supplier, order_date=timezone.now()
        )
        PurchaseOrderItem.objects.create(
            purchase_order=purchase_order,
            inventory_item=paneer_stock,
            quantity=Decimal("5000"),
            unit="g",
            cost_per_unit=Decimal("0.40"),
            total_cost=Decimal("2000.00"),
        )
        return purchase_order

    def test_receipt_adds_stock(self, purchase_order, paneer_stock):
        received = InventoryService.receive_purchase_order(purchase_order.id)

        paneer_stock.refresh_from_db()
        assert received.status == PurchaseOrder.PurchaseOrderStatus.RECEIVED
        assert received.actual_delivery_date is not None
        assert paneer_stock.current_stock == Decimal("6000")
        assert StockHistoryEntry.objects.get().reference_id == "po_PO-1001"

    def test_second_receipt_is_a_conflict(self, purchase_order, paneer_stock):
        InventoryService.receive_purchase_order(purchase_order.id)

        with pytest.raises(BusinessRuleConflict):
            InventoryService.receive_purchase_order(purchase_order.id)

        paneer_stock.refresh_from_db()
        assert paneer_stock.current_stock == Decimal("6000")

    def test_cancelled_order_cannot_be_received(self, purchase_order):
        PurchaseOrder.objects.filter(pk=purchase_order.pk).update(
            status=PurchaseOrder.PurchaseOrderStatus.CANCELLED
        )

        with pytest.raises(BusinessRuleConflict):
            InventoryService.receive_purchase_order(purchase_order.id)


@pytest.mark.django_db
class TestLowStock:

    def test_low_stock_listing(self, paneer_stock):
        butter = InventoryItem.objects.create(
            name="Butter", unit="g", current_stock=Decimal("50"), min_stock=Decimal("100")
        )

        assert list(InventoryService.get_low_stock_items()) == [butter]

    def test_low_stock_task_broadcasts(self, broadcasts):
        InventoryItem.objects.create(
            name="Cream", unit="ml", current_stock=Decimal("10"), min_stock=Decimal("10")
        )

        result = check_low_stock()

        assert result == {"status": "completed", "low_stock_count": 1}
        event, payload = broadcasts[0]
        assert event == "inventory_low_stock"
        assert payload["items"][0]["name"] == "Cream"

    def test_low_stock_task_quiet_when_nothing_is_low(self, paneer_stock, broadcasts):
        assert check_low_stock()["low_stock_count"] == 0
        assert broadcasts == []
