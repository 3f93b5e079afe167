from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
import logging

from billing.money import subtotal_of
from core_backend.exceptions import NotFound, OrderStateConflict
from floor_plan.models import Table
from floor_plan.serializers import TableSerializer
from notifications.services import broadcast_on_commit
from orders.models import Order
from orders.serializers import OrderSerializer
from orders.services.status_rules import parse_choice

logger = logging.getLogger(__name__)


@dataclass
class OrderActionResult:
    """
    Outcome of an order action. `should_print` is the caller's print intent,
    passed through untouched so the client knows whether to print a ticket.
    """

    order: Order
    invoice: Optional[object] = None
    should_print: bool = False


class OrderService:
    """Core service for order lifecycle management - creating, transitioning, completing orders."""

    _PRE_BILLING = [
        Order.OrderStatus.SAVED,
        Order.OrderStatus.SENT_TO_KITCHEN,
        Order.OrderStatus.READY_TO_BILL,
    ]

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.SAVED: _PRE_BILLING
        + [Order.OrderStatus.BILLED, Order.OrderStatus.PAID, Order.OrderStatus.COMPLETED],
        Order.OrderStatus.SENT_TO_KITCHEN: _PRE_BILLING
        + [Order.OrderStatus.BILLED, Order.OrderStatus.PAID, Order.OrderStatus.COMPLETED],
        Order.OrderStatus.READY_TO_BILL: _PRE_BILLING
        + [Order.OrderStatus.BILLED, Order.OrderStatus.PAID, Order.OrderStatus.COMPLETED],
        Order.OrderStatus.BILLED: [
            Order.OrderStatus.PAID,
            Order.OrderStatus.COMPLETED,
        ],
        Order.OrderStatus.PAID: [
            Order.OrderStatus.COMPLETED,
        ],
        Order.OrderStatus.COMPLETED: [],
    }

    @staticmethod
    def get_order(order_id, for_update: bool = False) -> Order:
        """
        Fetch an order by id.

        Raises:
            NotFound: If no order has that id (malformed ids included).
        """
        if isinstance(order_id, Order):
            order_id = order_id.pk
        if for_update:
            queryset = Order.objects.select_for_update()
        else:
            queryset = Order.objects.select_related("table", "table__floor")
        try:
            return queryset.get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise NotFound("Order", order_id)

    @staticmethod
    def get_table(table_id) -> Table:
        if isinstance(table_id, Table):
            return table_id
        try:
            return Table.objects.select_related("floor").get(pk=table_id)
        except (Table.DoesNotExist, ValueError, TypeError):
            raise NotFound("Table", table_id)

    @staticmethod
    def ensure_transition(order: Order, new_status) -> str:
        """
        Validate `new_status` against the vocabulary and the transition table.

        Raises:
            ValidationFailure: Unknown status string.
            OrderStateConflict: Transition not allowed from the current status.
        """
        new_status = parse_choice(new_status, Order.OrderStatus, "order status")
        if new_status not in OrderService.VALID_STATUS_TRANSITIONS.get(order.status, []):
            raise OrderStateConflict(order, new_status)
        return new_status

    @staticmethod
    def recalculate_total(order: Order) -> Order:
        """Rewrite order.total as the sum of price x quantity over its current items."""
        order.total = subtotal_of(order.items.all())
        order.save(update_fields=["total", "updated_at"])
        return order

    @staticmethod
    @transaction.atomic
    def create_order(
        order_type: str = Order.OrderType.DINE_IN,
        table=None,
        customer_name: str = "",
        customer_phone: str = "",
        customer_address: str = "",
        payment_mode: str = "",
    ) -> Order:
        """
        Creates a new, empty order with status `saved` and total 0.

        When bound to a table, the table is linked to the order and marked
        occupied in the same transaction.
        """
        order_type = parse_choice(order_type, Order.OrderType, "order type")
        if table is not None:
            table = OrderService.get_table(table)

        order = Order.objects.create(
            order_type=order_type,
            table=table,
            customer_name=customer_name or "",
            customer_phone=customer_phone or "",
            customer_address=customer_address or "",
            payment_mode=payment_mode or "",
        )
        logger.info(f"Created {order_type} order {order.id}")

        broadcast_on_commit("order_created", OrderSerializer(order).data)
        if table is not None:
            table.attach_order(order)
            OrderService.broadcast_table(table)
        return order

    @staticmethod
    def apply_status(order: Order, new_status: str) -> Order:
        now = timezone.now()
        order.status = new_status
        if new_status == Order.OrderStatus.BILLED:
            order.billed_at = now
        elif new_status == Order.OrderStatus.PAID:
            order.paid_at = now
            order.completed_at = now
        elif new_status == Order.OrderStatus.COMPLETED:
            order.completed_at = now
        order.save(
            update_fields=["status", "billed_at", "paid_at", "completed_at", "updated_at"]
        )
        return order

    @staticmethod
    @transaction.atomic
    def update_order_status(order_id, new_status: str) -> Order:
        """
        Generic guarded transition used by PATCH /orders/{id}/status/.
        """
        order = OrderService.get_order(order_id, for_update=True)
        new_status = OrderService.ensure_transition(order, new_status)
        OrderService.apply_status(order, new_status)
        broadcast_on_commit("order_updated", OrderSerializer(order).data)
        return order

    @staticmethod
    def send_to_kitchen(order_id, print_requested: bool = False) -> OrderActionResult:
        """Sends the order to the kitchen (KOT). No side effect beyond the status write."""
        order = OrderService.update_order_status(order_id, Order.OrderStatus.SENT_TO_KITCHEN)
        logger.info(f"Order {order.id} sent to kitchen (print={print_requested})")
        return OrderActionResult(order=order, should_print=bool(print_requested))

    @staticmethod
    @transaction.atomic
    def complete_order(order_id) -> Order:
        """
        Terminal transition for orders fulfilled without a payment step.
        Releases the table the order occupies.
        """
        order = OrderService.get_order(order_id, for_update=True)
        OrderService.ensure_transition(order, Order.OrderStatus.COMPLETED)
        order.mark_completed()

        OrderService.release_table(order)
        broadcast_on_commit("order_completed", OrderSerializer(order).data)
        return order

    @staticmethod
    def release_table(order: Order) -> Optional[Table]:
        """
        Detach `order` from its table and free the table. A table already
        holding a different order is left alone.
        """
        if not order.table_id:
            return None
        table = Table.objects.select_for_update().get(pk=order.table_id)
        if table.current_order_id not in (None, order.id):
            logger.warning(
                f"Table {table.number} now holds order {table.current_order_id}; "
                f"not releasing it for order {order.id}"
            )
            return None
        table.release()
        OrderService.broadcast_table(table)
        return table

    @staticmethod
    def broadcast_table(table: Table):
        broadcast_on_commit("table_updated", TableSerializer(table).data)

    @staticmethod
    def get_active_orders():
        return Order.objects.filter(status__in=Order.ACTIVE_STATUSES).select_related(
            "table", "table__floor"
        )

    @staticmethod
    def get_completed_orders():
        return Order.objects.filter(status__in=Order.FINISHED_STATUSES).select_related(
            "table", "table__floor"
        )
