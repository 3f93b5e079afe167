import uuid
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Invoice(models.Model):
    """
    An immutable bill snapshot. Items and split payments are stored as JSON
    copies taken at billing time.
    """

    class InvoiceStatus(models.TextChoices):
        SAVED = "Saved", _("Saved")
        BILLED = "Billed", _("Billed")
        PAID = "Paid", _("Paid")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    invoice_number = models.CharField(max_length=20, unique=True)
    order = models.ForeignKey(
        "orders.Order", on_delete=models.PROTECT, related_name="invoices"
    )
    table_number = models.CharField(max_length=20, blank=True, null=True)
    floor_name = models.CharField(max_length=100, blank=True, null=True)
    customer_name = models.CharField(max_length=200, blank=True, default="")
    customer_phone = models.CharField(max_length=30, blank=True, default="")

    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    tax = models.DecimalField(max_digits=10, decimal_places=2)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=10, decimal_places=2)

    payment_mode = models.CharField(max_length=30, default="cash")
    split_payments = models.JSONField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=InvoiceStatus.choices)
    items = models.JSONField(default=list)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.invoice_number} ({self.status})"
