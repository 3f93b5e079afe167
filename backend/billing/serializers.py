from rest_framework import serializers

from billing.models import Invoice


class InvoiceSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "order_id",
            "table_number",
            "floor_name",
            "customer_name",
            "customer_phone",
            "subtotal",
            "tax",
            "discount",
            "total",
            "payment_mode",
            "split_payments",
            "status",
            "items",
            "notes",
            "created_at",
        ]
        read_only_fields = fields
