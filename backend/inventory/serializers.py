from rest_framework import serializers

from inventory.models import (
    InventoryItem,
    PurchaseOrder,
    PurchaseOrderItem,
    StockHistoryEntry,
    Wastage,
)


class InventoryItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "name",
            "category",
            "current_stock",
            "unit",
            "min_stock",
            "cost_per_unit",
            "supplier",
            "is_low_stock",
            "last_updated",
        ]
        read_only_fields = fields


class WastageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wastage
        fields = [
            "id",
            "inventory_item",
            "quantity",
            "unit",
            "reason",
            "reported_by",
            "notes",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseOrderItem
        fields = ["id", "inventory_item", "quantity", "unit", "cost_per_unit", "total_cost"]


class PurchaseOrderSerializer(serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            "id",
            "order_number",
            "supplier",
            "order_date",
            "expected_delivery_date",
            "actual_delivery_date",
            "status",
            "total_amount",
            "notes",
            "items",
        ]
        read_only_fields = fields


class StockHistoryEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = StockHistoryEntry
        fields = [
            "id",
            "inventory_item",
            "operation_type",
            "quantity_change",
            "previous_quantity",
            "new_quantity",
            "reference_id",
            "notes",
            "timestamp",
        ]
        read_only_fields = fields
