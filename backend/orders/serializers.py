from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)
    menu_item_id = serializers.CharField(source="menu_item_ref", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order_id",
            "menu_item_id",
            "name",
            "price",
            "quantity",
            "status",
            "is_veg",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    table_id = serializers.PrimaryKeyRelatedField(source="table", read_only=True)
    table_number = serializers.CharField(source="table.number", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "table_id",
            "table_number",
            "order_type",
            "status",
            "total",
            "customer_name",
            "customer_phone",
            "customer_address",
            "payment_mode",
            "created_at",
            "billed_at",
            "paid_at",
            "completed_at",
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["items"]
        read_only_fields = fields


# --- Request serializers -------------------------------------------------


class OrderCreateSerializer(serializers.Serializer):
    order_type = serializers.ChoiceField(
        choices=Order.OrderType.choices, default=Order.OrderType.DINE_IN
    )
    table_id = serializers.IntegerField(required=False, allow_null=True)
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")
    customer_address = serializers.CharField(required=False, allow_blank=True, default="")
    payment_mode = serializers.CharField(required=False, allow_blank=True, default="")


class AddItemSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(required=False, max_length=200)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    quantity = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    is_veg = serializers.BooleanField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        if not attrs.get("menu_item_id") and (
            not attrs.get("name") or attrs.get("price") is None
        ):
            raise serializers.ValidationError(
                "Provide either menu_item_id or both name and price."
            )
        return attrs


class StatusSerializer(serializers.Serializer):
    """Carries a raw status string; the services own the vocabulary check."""

    status = serializers.CharField()


class OrderActionSerializer(serializers.Serializer):
    print = serializers.BooleanField(required=False, default=False)


class SplitPaymentSerializer(serializers.Serializer):
    person = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    payment_mode = serializers.CharField(required=False, allow_blank=True, default="")


class CheckoutSerializer(OrderActionSerializer):
    payment_mode = serializers.CharField(required=False, allow_blank=True, default="")
    split_payments = SplitPaymentSerializer(many=True, required=False, allow_null=True)
