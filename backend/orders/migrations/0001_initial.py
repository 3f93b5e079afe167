import django.db.models.deletion
import uuid
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("floor_plan", "0001_initial"),
        ("menu", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_type", models.CharField(choices=[("dine-in", "Dine In"), ("delivery", "Delivery"), ("pickup", "Pickup")], default="dine-in", max_length=20)),
                ("status", models.CharField(choices=[("saved", "Saved"), ("sent_to_kitchen", "Sent to Kitchen"), ("ready_to_bill", "Ready to Bill"), ("billed", "Billed"), ("paid", "Paid"), ("completed", "Completed")], default="saved", max_length=20)),
                ("total", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=30)),
                ("customer_address", models.TextField(blank=True, default="")),
                ("payment_mode", models.CharField(blank=True, default="", max_length=30)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("billed_at", models.DateTimeField(blank=True, null=True)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("table", models.ForeignKey(blank=True, help_text="Null for delivery and pickup orders", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to="floor_plan.table")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="orders_order_status_idx"),
                    models.Index(fields=["customer_phone"], name="orders_order_phone_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("status", models.CharField(choices=[("new", "New"), ("preparing", "Preparing"), ("ready", "Ready"), ("served", "Served")], default="new", max_length=20)),
                ("is_veg", models.BooleanField(default=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("menu_item", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_items", to="menu.menuitem")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
    ]
