from rest_framework import serializers

from digital_menu.models import DigitalMenuCustomer, DigitalMenuCustomerOrders


class DigitalMenuCustomerOrdersSerializer(serializers.ModelSerializer):
    class Meta:
        model = DigitalMenuCustomerOrders
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "customer_phone",
            "orders",
            "created_at",
            "updated_at",
        ]


class DigitalMenuCustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = DigitalMenuCustomer
        fields = ["id", "phone_number", "name", "table_status", "login_status", "updated_at"]


class SyncStartSerializer(serializers.Serializer):
    interval_ms = serializers.IntegerField(required=False, min_value=100)
