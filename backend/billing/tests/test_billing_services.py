"""
Invoice composer tests: save / bill / checkout, split payments, invoice
numbering and the checkout saga order.
"""
from decimal import Decimal
from unittest import mock

import pytest

from billing.models import Invoice
from billing.services import BillingService, CheckoutStep, validate_split_payments
from core_backend.exceptions import NotFound, OrderStateConflict, ValidationFailure
from floor_plan.models import Table
from orders.models import Order
from orders.services import OrderItemService, OrderService


@pytest.fixture
def order_totalling_210(table):
    """One 200.00 item: subtotal 200.00, tax 10.00, total 210.00."""
    order = OrderService.create_order(order_type="dine-in", table=table.id)
    OrderItemService.add_item(order.id, name="Tasting Menu", price="200.00")
    return order


class TestValidateSplitPayments:

    def test_matching_split_is_accepted_and_normalized(self):
        splits = validate_split_payments(
            [
                {"person": "A", "amount": 100, "payment_mode": "cash"},
                {"person": "B", "amount": "110.00", "payment_mode": "card"},
            ],
            Decimal("210.00"),
        )

        assert splits == [
            {"person": "A", "amount": "100.00", "payment_mode": "cash"},
            {"person": "B", "amount": "110.00", "payment_mode": "card"},
        ]

    def test_short_split_is_rejected(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_split_payments(
                [{"person": "A", "amount": 100}, {"person": "B", "amount": 100}],
                Decimal("210.00"),
            )
        assert exc_info.value.message == "Split payment amounts must equal the total bill"

    def test_off_by_two_cents_is_rejected(self):
        with pytest.raises(ValidationFailure):
            validate_split_payments(
                [{"person": "A", "amount": "100.00"}, {"person": "B", "amount": "110.02"}],
                Decimal("210.00"),
            )

    def test_one_cent_is_tolerated(self):
        splits = validate_split_payments(
            [{"person": "A", "amount": "100.00"}, {"person": "B", "amount": "110.01"}],
            Decimal("210.00"),
        )
        assert len(splits) == 2

    def test_non_positive_amount_is_rejected(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_split_payments(
                [{"person": "A", "amount": "220.00"}, {"person": "B", "amount": "-10.00"}],
                Decimal("210.00"),
            )
        assert exc_info.value.message == "Split payment amounts must be positive"

    @pytest.mark.parametrize("value", [None, []])
    def test_no_split(self, value):
        assert validate_split_payments(value, Decimal("210.00")) is None


@pytest.mark.django_db
class TestSaveAndBill:

    def test_save_without_print_creates_no_invoice(self, order_with_items):
        OrderService.send_to_kitchen(order_with_items.id)

        result = BillingService.save_order(order_with_items.id, print_requested=False)

        assert result.order.status == Order.OrderStatus.SAVED
        assert result.invoice is None
        assert result.should_print is False
        assert Invoice.objects.count() == 0

    def test_save_with_print_creates_saved_invoice(
        self, order_with_items, django_capture_on_commit_callbacks, event_names
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = BillingService.save_order(order_with_items.id, print_requested=True)

        assert result.should_print is True
        assert result.invoice.status == Invoice.InvoiceStatus.SAVED
        assert result.invoice.total == Decimal("521.85")
        assert event_names() == ["invoice_created", "order_updated"]

    def test_bill_creates_billed_invoice_and_keeps_table(
        self, order_with_items, django_capture_on_commit_callbacks, event_names
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = BillingService.bill_order(order_with_items.id)

        table = Table.objects.get(pk=order_with_items.table_id)
        invoice = result.invoice
        assert result.order.status == Order.OrderStatus.BILLED
        assert result.order.billed_at is not None
        assert invoice.status == Invoice.InvoiceStatus.BILLED
        assert invoice.invoice_number == "INV-0001"
        assert invoice.subtotal == Decimal("497.00")
        assert invoice.tax == Decimal("24.85")
        assert invoice.total == Decimal("521.85")
        assert invoice.table_number == "5"
        assert invoice.floor_name == "Ground Floor"
        assert invoice.payment_mode == "cash"
        assert sorted(invoice.items, key=lambda item: item["name"]) == [
            {"name": "Dal Makhani", "quantity": 1, "price": "99.00", "is_veg": True, "notes": None},
            {"name": "Paneer Tikka", "quantity": 2, "price": "199.00", "is_veg": True, "notes": None},
        ]
        assert table.current_order_id == order_with_items.id
        assert event_names() == ["order_updated", "invoice_created"]

    def test_bill_paid_order_is_rejected(self, order_with_items):
        BillingService.checkout(order_with_items.id)

        with pytest.raises(OrderStateConflict):
            BillingService.bill_order(order_with_items.id)
        assert Invoice.objects.count() == 1


@pytest.mark.django_db
class TestCheckout:

    def test_checkout_runs_saga_in_order(
        self, order_with_items, django_capture_on_commit_callbacks, event_names
    ):
        """
        Scenario:
        - Checkout a dine-in order with two lines
        - Expected: paid, table freed, Paid invoice, broadcasts in saga order
        """
        with django_capture_on_commit_callbacks(execute=True):
            result = BillingService.checkout(order_with_items.id, payment_mode="upi")

        order = Order.objects.get(pk=order_with_items.id)
        table = Table.objects.get(pk=order.table_id)
        assert order.status == Order.OrderStatus.PAID
        assert order.payment_mode == "upi"
        assert order.paid_at is not None
        assert order.completed_at is not None
        assert table.status == Table.TableStatus.FREE
        assert table.current_order_id is None
        assert result.invoice.status == Invoice.InvoiceStatus.PAID
        assert result.invoice.payment_mode == "upi"
        assert result.invoice.table_number == "5"
        assert result.completed_steps == [
            CheckoutStep.ORDER_PAID,
            CheckoutStep.TABLE_RELEASED,
            CheckoutStep.INVOICE_CREATED,
            CheckoutStep.INVENTORY_DEDUCTED,
            CheckoutStep.BROADCAST,
        ]
        assert event_names() == [
            "table_updated",
            "inventory_updated",
            "order_paid",
            "invoice_created",
        ]

    def test_payment_mode_defaults_to_cash(self, order_with_items):
        result = BillingService.checkout(order_with_items.id)

        assert result.order.payment_mode == "cash"
        assert result.invoice.payment_mode == "cash"

    def test_second_checkout_is_rejected(self, order_with_items):
        BillingService.checkout(order_with_items.id)

        with pytest.raises(OrderStateConflict):
            BillingService.checkout(order_with_items.id)

        assert Invoice.objects.filter(order=order_with_items).count() == 1

    def test_checkout_of_billed_order(self, order_with_items):
        BillingService.bill_order(order_with_items.id)

        result = BillingService.checkout(order_with_items.id)

        assert result.invoice.invoice_number == "INV-0002"
        assert Invoice.objects.filter(order=order_with_items).count() == 2

    def test_split_payment_checkout(self, order_totalling_210):
        result = BillingService.checkout(
            order_totalling_210.id,
            split_payments=[
                {"person": "A", "amount": "100.00", "payment_mode": "cash"},
                {"person": "B", "amount": "110.00", "payment_mode": "card"},
            ],
        )

        assert result.invoice.total == Decimal("210.00")
        assert result.invoice.split_payments[1] == {
            "person": "B",
            "amount": "110.00",
            "payment_mode": "card",
        }

    def test_bad_split_writes_nothing(self, order_totalling_210):
        with pytest.raises(ValidationFailure):
            BillingService.checkout(
                order_totalling_210.id,
                split_payments=[{"person": "A", "amount": 100}, {"person": "B", "amount": 100}],
            )

        order = Order.objects.get(pk=order_totalling_210.id)
        assert order.status == Order.OrderStatus.SAVED
        assert Invoice.objects.count() == 0
        assert Table.objects.get(pk=order.table_id).status == Table.TableStatus.OCCUPIED

    def test_inventory_failure_does_not_undo_payment(self, order_with_items):
        with mock.patch(
            "billing.services.InventoryService.deduct_for_order",
            side_effect=RuntimeError("stock table locked"),
        ):
            result = BillingService.checkout(order_with_items.id)

        assert CheckoutStep.INVENTORY_DEDUCTED not in result.completed_steps
        assert Order.objects.get(pk=order_with_items.id).status == Order.OrderStatus.PAID
        assert Invoice.objects.filter(order=order_with_items).count() == 1

    def test_checkout_mirrors_free_status_for_customer(self, table):
        order = OrderService.create_order(table=table.id, customer_phone="9000000001")
        OrderItemService.add_item(order.id, name="Lassi", price="60.00")
        received = []

        from orders.signals import customer_table_status_changed

        def receiver(sender, phone=None, status=None, **kwargs):
            received.append((phone, status))

        customer_table_status_changed.connect(receiver)
        try:
            BillingService.checkout(order.id)
        finally:
            customer_table_status_changed.disconnect(receiver)

        assert received == [("9000000001", "free")]

    def test_should_print_is_passed_through(self, order_with_items):
        result = BillingService.checkout(order_with_items.id, print_requested=True)

        assert result.should_print is True

    def test_unknown_order(self):
        with pytest.raises(NotFound):
            BillingService.checkout("5b1a3c2e-0000-0000-0000-000000000000")


@pytest.mark.django_db
class TestInvoiceNumbering:

    def test_nth_invoice_is_numbered_n(self, paneer_tikka):
        numbers = []
        for _ in range(3):
            order = OrderService.create_order(order_type="pickup")
            OrderItemService.add_item(order.id, menu_item=paneer_tikka.id)
            numbers.append(BillingService.checkout(order.id).invoice.invoice_number)

        assert numbers == ["INV-0001", "INV-0002", "INV-0003"]

    def test_taken_number_is_skipped(self, order_with_items):
        """
        Scenario:
        - The count-based candidate INV-0001 is already taken by a concurrent writer
        - Expected: the insert is retried with the next number
        """
        with mock.patch.object(BillingService, "next_invoice_number", side_effect=["INV-0001", "INV-0002"]):
            first_order = OrderService.create_order(order_type="pickup")
            OrderItemService.add_item(first_order.id, name="Tea", price="20.00")
            Invoice.objects.create(
                invoice_number="INV-0001",
                order=first_order,
                subtotal=Decimal("20.00"),
                tax=Decimal("1.00"),
                total=Decimal("21.00"),
                status=Invoice.InvoiceStatus.PAID,
            )

            result = BillingService.checkout(order_with_items.id)

        assert result.invoice.invoice_number == "INV-0002"
