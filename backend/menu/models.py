from decimal import Decimal

from django.db import models
from django.db.models.functions import Lower


class MenuItemQuerySet(models.QuerySet):
    def by_name(self, name):
        """Case-insensitive exact match on the item name."""
        return self.filter(name__iexact=(name or "").strip())


class MenuItem(models.Model):
    """A sellable dish. Order items snapshot its name, price and veg flag."""

    name = models.CharField(max_length=200)
    category = models.CharField(max_length=100, blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    is_veg = models.BooleanField(default=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = MenuItemQuerySet.as_manager()

    class Meta:
        ordering = [Lower("name")]

    def __str__(self):
        return self.name
