from django.contrib import admin

from inventory.models import (
    InventoryItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Recipe,
    RecipeIngredient,
    StockHistoryEntry,
    Supplier,
    Wastage,
)


class RecipeIngredientInline(admin.TabularInline):
    model = RecipeIngredient
    extra = 1


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 1


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "current_stock", "unit", "min_stock", "supplier")
    list_filter = ("category",)
    search_fields = ("name",)


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    list_display = ("menu_item", "created_at")
    inlines = [RecipeIngredientInline]


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "supplier", "status", "order_date", "actual_delivery_date")
    list_filter = ("status",)
    inlines = [PurchaseOrderItemInline]


@admin.register(StockHistoryEntry)
class StockHistoryEntryAdmin(admin.ModelAdmin):
    list_display = ("inventory_item", "operation_type", "quantity_change", "new_quantity", "timestamp")
    list_filter = ("operation_type",)


admin.site.register(Supplier)
admin.site.register(Wastage)
