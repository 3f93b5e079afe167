import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    class OrderType(models.TextChoices):
        DINE_IN = "dine-in", _("Dine In")
        DELIVERY = "delivery", _("Delivery")
        PICKUP = "pickup", _("Pickup")

    class OrderStatus(models.TextChoices):
        SAVED = "saved", _("Saved")
        SENT_TO_KITCHEN = "sent_to_kitchen", _("Sent to Kitchen")
        READY_TO_BILL = "ready_to_bill", _("Ready to Bill")
        BILLED = "billed", _("Billed")
        PAID = "paid", _("Paid")
        COMPLETED = "completed", _("Completed")

    # Orders still on the floor, shown on the running-orders screen.
    ACTIVE_STATUSES = (
        OrderStatus.SENT_TO_KITCHEN,
        OrderStatus.READY_TO_BILL,
        OrderStatus.BILLED,
    )
    FINISHED_STATUSES = (OrderStatus.PAID, OrderStatus.COMPLETED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table = models.ForeignKey(
        "floor_plan.Table",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text=_("Null for delivery and pickup orders"),
    )
    order_type = models.CharField(
        max_length=20, choices=OrderType.choices, default=OrderType.DINE_IN
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.SAVED
    )
    total = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )

    customer_name = models.CharField(max_length=200, blank=True, default="")
    customer_phone = models.CharField(max_length=30, blank=True, default="")
    customer_address = models.TextField(blank=True, default="")
    payment_mode = models.CharField(max_length=30, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    billed_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_order_status_idx"),
            models.Index(fields=["customer_phone"], name="orders_order_phone_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.get_status_display()})"

    @property
    def is_finished(self):
        return self.status in self.FINISHED_STATUSES

    def mark_billed(self):
        self.status = self.OrderStatus.BILLED
        self.billed_at = timezone.now()
        self.save(update_fields=["status", "billed_at", "updated_at"])

    def mark_paid(self, payment_mode=None):
        now = timezone.now()
        self.status = self.OrderStatus.PAID
        if payment_mode:
            self.payment_mode = payment_mode
        self.paid_at = now
        self.completed_at = now
        self.save(
            update_fields=["status", "payment_mode", "paid_at", "completed_at", "updated_at"]
        )

    def mark_completed(self):
        self.status = self.OrderStatus.COMPLETED
        self.completed_at = timezone.now()
        self.save(update_fields=["status", "completed_at", "updated_at"])


class OrderItem(models.Model):
    """
    A line on an order. Name, price and veg flag are snapshots taken when the
    item was added, so later menu edits never change an existing order.
    """

    class ItemStatus(models.TextChoices):
        NEW = "new", _("New")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready")
        SERVED = "served", _("Served")

    # Menu reference reported for items that matched no menu entry.
    UNKNOWN_MENU_ITEM = "unknown"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)
    status = models.CharField(
        max_length=20, choices=ItemStatus.choices, default=ItemStatus.NEW
    )
    is_veg = models.BooleanField(default=True)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def menu_item_ref(self):
        if self.menu_item_id is None:
            return self.UNKNOWN_MENU_ITEM
        return str(self.menu_item_id)

    @property
    def line_total(self):
        return self.price * self.quantity
