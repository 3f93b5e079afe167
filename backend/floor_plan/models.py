from django.db import models
from django.utils.translation import gettext_lazy as _


class Floor(models.Model):
    name = models.CharField(max_length=100, unique=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]

    def __str__(self):
        return self.name


class Table(models.Model):
    """
    A dining table. `current_order` points at the order occupying it; a table
    with a current order is never `free`.
    """

    class TableStatus(models.TextChoices):
        FREE = "free", _("Free")
        OCCUPIED = "occupied", _("Occupied")
        RESERVED = "reserved", _("Reserved")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready")
        SERVED = "served", _("Served")

    number = models.CharField(max_length=20)
    seats = models.PositiveIntegerField(default=4)
    status = models.CharField(
        max_length=20, choices=TableStatus.choices, default=TableStatus.FREE
    )
    floor = models.ForeignKey(
        Floor,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tables",
    )
    current_order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["floor__display_order", "number"]
        indexes = [
            models.Index(fields=["number"], name="floor_plan_table_number_idx"),
        ]

    def __str__(self):
        if self.floor_id:
            return f"Table {self.number} ({self.floor.name})"
        return f"Table {self.number}"

    def attach_order(self, order):
        self.current_order = order
        self.status = self.TableStatus.OCCUPIED
        self.save(update_fields=["current_order", "status"])

    def release(self):
        self.current_order = None
        self.status = self.TableStatus.FREE
        self.save(update_fields=["current_order", "status"])

    def set_status(self, status):
        self.status = status
        self.save(update_fields=["status"])
