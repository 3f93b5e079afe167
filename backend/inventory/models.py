from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Supplier(models.Model):
    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class InventoryItem(models.Model):
    """
    An ingredient or consumable held in stock. `current_stock` may go
    negative: recipe deductions at checkout are never clamped.
    """

    name = models.CharField(max_length=200)
    category = models.CharField(max_length=100, blank=True, default="")
    current_stock = models.DecimalField(
        max_digits=12, decimal_places=3, default=Decimal("0")
    )
    unit = models.CharField(max_length=20, help_text=_("e.g. g, kg, ml, pcs"))
    min_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        help_text=_("Low stock threshold"),
    )
    cost_per_unit = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="inventory_items",
    )
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.current_stock} {self.unit})"

    @property
    def is_low_stock(self):
        return self.current_stock <= self.min_stock


class Recipe(models.Model):
    """
    Ingredients consumed by one unit of a menu item. A menu item may carry
    several recipes; the most recently created one is used.
    """

    menu_item = models.ForeignKey(
        "menu.MenuItem", on_delete=models.CASCADE, related_name="recipes"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        get_latest_by = ["created_at", "id"]

    def __str__(self):
        return f"Recipe for {self.menu_item}"


class RecipeIngredient(models.Model):
    recipe = models.ForeignKey(Recipe, on_delete=models.CASCADE, related_name="ingredients")
    inventory_item = models.ForeignKey(
        InventoryItem, on_delete=models.PROTECT, related_name="recipe_ingredients"
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text=_("Quantity consumed per one unit of the menu item"),
    )
    unit = models.CharField(max_length=20)

    def __str__(self):
        return f"{self.quantity} {self.unit} {self.inventory_item.name}"


class PurchaseOrder(models.Model):
    class PurchaseOrderStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        ORDERED = "ordered", _("Ordered")
        RECEIVED = "received", _("Received")
        CANCELLED = "cancelled", _("Cancelled")

    order_number = models.CharField(max_length=50, unique=True)
    supplier = models.ForeignKey(
        Supplier, on_delete=models.PROTECT, related_name="purchase_orders"
    )
    order_date = models.DateTimeField()
    expected_delivery_date = models.DateTimeField(null=True, blank=True)
    actual_delivery_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.PENDING,
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.order_number


class PurchaseOrderItem(models.Model):
    purchase_order = models.ForeignKey(
        PurchaseOrder, on_delete=models.CASCADE, related_name="items"
    )
    inventory_item = models.ForeignKey(
        InventoryItem, on_delete=models.PROTECT, related_name="purchase_order_items"
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit = models.CharField(max_length=20)
    cost_per_unit = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))


class Wastage(models.Model):
    inventory_item = models.ForeignKey(
        InventoryItem, on_delete=models.PROTECT, related_name="wastages"
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit = models.CharField(max_length=20)
    reason = models.CharField(max_length=200)
    reported_by = models.CharField(max_length=200, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]


class StockHistoryEntry(models.Model):
    """
    Tracks all stock operations for audit trail and history purposes.
    """

    class Operation(models.TextChoices):
        ORDER_DEDUCTION = "ORDER_DEDUCTION", _("Order Deduction")
        WASTAGE = "WASTAGE", _("Wastage")
        PURCHASE_RECEIPT = "PURCHASE_RECEIPT", _("Purchase Receipt")

    inventory_item = models.ForeignKey(
        InventoryItem, on_delete=models.CASCADE, related_name="stock_history"
    )
    operation_type = models.CharField(max_length=20, choices=Operation.choices)
    quantity_change = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        help_text=_("Change in quantity (positive for additions, negative for subtractions)"),
    )
    previous_quantity = models.DecimalField(max_digits=12, decimal_places=3)
    new_quantity = models.DecimalField(max_digits=12, decimal_places=3)
    reference_id = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        verbose_name_plural = "Stock history entries"
