from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class DigitalMenuCustomerOrders(models.Model):
    """
    One document per external digital-menu customer. `orders` is an embedded
    list owned by the digital menu, in its own vocabulary:

        {"_id", "orderDate", "status", "paymentStatus", "paymentMethod",
         "tableNumber", "floorNumber", "items": [{"menuItemName", "quantity",
         "price", "notes", "spiceLevel"}], "tax", "total",
         "syncedToPOS", "syncedAt", "posOrderId"}

    The POS only ever writes `syncedToPOS`, `syncedAt` and `posOrderId`.
    """

    customer_id = models.CharField(max_length=100, blank=True, default="")
    customer_name = models.CharField(max_length=200, blank=True, default="")
    customer_phone = models.CharField(max_length=30, blank=True, default="")
    orders = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "digital_menu_customer_orders"
        ordering = ["-created_at"]
        verbose_name = _("Digital menu customer orders")
        verbose_name_plural = _("Digital menu customer orders")

    def __str__(self):
        return f"{self.customer_name or self.customer_id} ({len(self.embedded_orders())} orders)"

    def embedded_orders(self):
        if not isinstance(self.orders, list):
            return []
        return [order for order in self.orders if isinstance(order, dict)]


class DigitalMenuCustomer(models.Model):
    """
    External customer profile. The POS writes `table_status` (the status the
    guest sees on their phone) and `updated_at`, nothing else.
    """

    phone_number = models.CharField(max_length=30, db_index=True)
    name = models.CharField(max_length=200, blank=True, default="")
    table_status = models.CharField(max_length=20, blank=True, default="")
    login_status = models.CharField(max_length=20, blank=True, default="")
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "digital_menu_customers"
        ordering = ["-updated_at"]

    def __str__(self):
        return f"{self.name or self.phone_number} ({self.table_status or 'unknown'})"
