"""
Invoice composer: save-with-print, bill and checkout share one computation
(subtotal, fixed-rate tax, total) and differ only in the target order status
and what happens after the invoice is written.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import IntegrityError, transaction
import logging

from billing.models import Invoice
from billing.money import (
    BillTotals,
    amounts_match,
    compute_bill,
    format_amount,
    to_decimal,
)
from billing.serializers import InvoiceSerializer
from core_backend.exceptions import BusinessRuleConflict, OrderStateConflict, ValidationFailure
from inventory.services import InventoryService
from notifications.services import broadcast_on_commit
from orders.models import Order
from orders.serializers import OrderSerializer
from orders.services import OrderActionResult, OrderService
from orders.signals import customer_table_status_changed, send_best_effort

logger = logging.getLogger(__name__)

MAX_INVOICE_NUMBER_RETRIES = 5

DEFAULT_PAYMENT_MODE = "cash"


@dataclass
class CheckoutResult(OrderActionResult):
    """OrderActionResult plus the saga steps that ran, in order."""

    completed_steps: List[str] = field(default_factory=list)


class CheckoutStep:
    ORDER_PAID = "order_paid"
    TABLE_RELEASED = "table_released"
    INVOICE_CREATED = "invoice_created"
    INVENTORY_DEDUCTED = "inventory_deducted"
    BROADCAST = "broadcast"


def validate_split_payments(split_payments, total) -> Optional[list]:
    """
    Check a split list against the bill total and return it normalized.

    The sum must match `total` within 0.01 and every amount must be positive.
    An empty or missing list means no split.

    Raises:
        ValidationFailure: On either violation; nothing has been written yet.
    """
    if not split_payments:
        return None

    entries = []
    for split in split_payments:
        amount = to_decimal(split.get("amount"))
        entries.append(
            {
                "person": str(split.get("person") or ""),
                "amount": amount,
                "payment_mode": split.get("payment_mode") or split.get("paymentMode") or "",
            }
        )

    split_sum = sum((entry["amount"] for entry in entries), to_decimal(0))
    if not amounts_match(split_sum, total):
        raise ValidationFailure(
            "Split payment amounts must equal the total bill",
            details={"split_sum": format_amount(split_sum), "total": format_amount(total)},
        )
    if any(entry["amount"] <= 0 for entry in entries):
        raise ValidationFailure("Split payment amounts must be positive")

    for entry in entries:
        entry["amount"] = format_amount(entry["amount"])
    return entries


class BillingService:
    """Builds invoices from orders and runs the save / bill / checkout flows."""

    @staticmethod
    def next_invoice_number(offset: int = 0) -> str:
        """INV- followed by (invoice count + 1 + offset), zero padded to 4 digits."""
        return f"INV-{Invoice.objects.count() + 1 + offset:04d}"

    @staticmethod
    def snapshot_items(order_items) -> list:
        return [
            {
                "name": item.name,
                "quantity": item.quantity,
                "price": format_amount(item.price),
                "is_veg": item.is_veg,
                "notes": item.notes or None,
            }
            for item in order_items
        ]

    @staticmethod
    def create_invoice(
        order: Order,
        invoice_status: str,
        totals: BillTotals,
        order_items,
        payment_mode: str,
        split_payments: Optional[list] = None,
    ) -> Invoice:
        """
        Insert an invoice with the next sequential number. The number column is
        unique; when another invoice took the number first the number is bumped
        and the insert retried.
        """
        table = order.table
        fields = dict(
            order=order,
            table_number=table.number if table else None,
            floor_name=table.floor.name if table and table.floor_id else None,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
            payment_mode=payment_mode,
            split_payments=split_payments,
            status=invoice_status,
            items=BillingService.snapshot_items(order_items),
            notes=None,
        )

        for attempt in range(MAX_INVOICE_NUMBER_RETRIES):
            invoice_number = BillingService.next_invoice_number(offset=attempt)
            try:
                with transaction.atomic():
                    invoice = Invoice.objects.create(invoice_number=invoice_number, **fields)
            except IntegrityError:
                if not Invoice.objects.filter(invoice_number=invoice_number).exists():
                    raise
                logger.warning(f"Invoice number {invoice_number} already taken, retrying")
                continue
            logger.info(f"Created {invoice_status} invoice {invoice_number} for order {order.id}")
            return invoice

        raise BusinessRuleConflict(
            "Failed to allocate a unique invoice number after multiple retries."
        )

    @staticmethod
    def _order_with_items(order_id):
        order = OrderService.get_order(order_id, for_update=True)
        return order, list(order.items.all())

    @staticmethod
    @transaction.atomic
    def save_order(order_id, print_requested: bool = False) -> OrderActionResult:
        """
        Move the order to `saved`. When printing, a `Saved` invoice is created
        for the receipt.
        """
        order, order_items = BillingService._order_with_items(order_id)
        new_status = OrderService.ensure_transition(order, Order.OrderStatus.SAVED)
        OrderService.apply_status(order, new_status)

        invoice = None
        if print_requested:
            invoice = BillingService.create_invoice(
                order,
                Invoice.InvoiceStatus.SAVED,
                compute_bill(order_items),
                order_items,
                payment_mode=order.payment_mode or DEFAULT_PAYMENT_MODE,
            )
            broadcast_on_commit("invoice_created", InvoiceSerializer(invoice).data)

        broadcast_on_commit("order_updated", OrderSerializer(order).data)
        return OrderActionResult(order=order, invoice=invoice, should_print=bool(print_requested))

    @staticmethod
    @transaction.atomic
    def bill_order(order_id, print_requested: bool = False) -> OrderActionResult:
        """
        Move the order to `billed` and always emit a `Billed` invoice. The
        table stays attached until checkout.
        """
        order, order_items = BillingService._order_with_items(order_id)
        OrderService.ensure_transition(order, Order.OrderStatus.BILLED)
        order.mark_billed()

        invoice = BillingService.create_invoice(
            order,
            Invoice.InvoiceStatus.BILLED,
            compute_bill(order_items),
            order_items,
            payment_mode=order.payment_mode or DEFAULT_PAYMENT_MODE,
        )

        broadcast_on_commit("order_updated", OrderSerializer(order).data)
        broadcast_on_commit("invoice_created", InvoiceSerializer(invoice).data)
        return OrderActionResult(order=order, invoice=invoice, should_print=bool(print_requested))

    @staticmethod
    @transaction.atomic
    def checkout(
        order_id,
        payment_mode: Optional[str] = None,
        split_payments: Optional[list] = None,
        print_requested: bool = False,
    ) -> CheckoutResult:
        """
        Take payment for an order. Steps run in a fixed order:

        (a) order -> paid, stamp paid_at/completed_at, record the payment mode
        (b) detach and free the table, mirror the customer-facing status to free
        (c) create the Paid invoice
        (d) deduct inventory per recipe (best effort, never undoes a-c)
        (e) broadcast order_paid then invoice_created

        Validation happens before any write.

        Raises:
            NotFound: Unknown order.
            OrderStateConflict: The order is already paid or completed.
            ValidationFailure: Split payments do not add up or are not positive.
        """
        order, order_items = BillingService._order_with_items(order_id)
        if order.is_finished:
            raise OrderStateConflict(
                order,
                Order.OrderStatus.PAID,
                message=f"Order {order.id} is already {order.status}.",
            )
        OrderService.ensure_transition(order, Order.OrderStatus.PAID)

        totals = compute_bill(order_items)
        splits = validate_split_payments(split_payments, totals.total)
        payment_mode = payment_mode or DEFAULT_PAYMENT_MODE

        result = CheckoutResult(order=order, should_print=bool(print_requested))

        # (a)
        order.mark_paid(payment_mode)
        result.completed_steps.append(CheckoutStep.ORDER_PAID)

        # (b)
        if OrderService.release_table(order) is not None:
            result.completed_steps.append(CheckoutStep.TABLE_RELEASED)
        if order.customer_phone:
            send_best_effort(
                customer_table_status_changed,
                sender=Order,
                phone=order.customer_phone,
                status="free",
            )

        # (c)
        result.invoice = BillingService.create_invoice(
            order,
            Invoice.InvoiceStatus.PAID,
            totals,
            order_items,
            payment_mode=payment_mode,
            split_payments=splits,
        )
        result.completed_steps.append(CheckoutStep.INVOICE_CREATED)

        # (d)
        try:
            with transaction.atomic():
                InventoryService.deduct_for_order(order)
        except Exception as e:
            logger.error(f"Error deducting inventory for order {order.id}: {e}")
        else:
            result.completed_steps.append(CheckoutStep.INVENTORY_DEDUCTED)
            broadcast_on_commit("inventory_updated", {"order_id": str(order.id)})

        # (e)
        broadcast_on_commit("order_paid", OrderSerializer(order).data)
        broadcast_on_commit("invoice_created", InvoiceSerializer(result.invoice).data)
        result.completed_steps.append(CheckoutStep.BROADCAST)

        logger.info(
            f"Checked out order {order.id} ({payment_mode}, total {totals.total}): "
            f"{', '.join(result.completed_steps)}"
        )
        return result
