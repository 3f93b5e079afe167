import django.db.models.deletion
import uuid
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("invoice_number", models.CharField(max_length=20, unique=True)),
                ("table_number", models.CharField(blank=True, max_length=20, null=True)),
                ("floor_name", models.CharField(blank=True, max_length=100, null=True)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=30)),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                ("tax", models.DecimalField(decimal_places=2, max_digits=10)),
                ("discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("total", models.DecimalField(decimal_places=2, max_digits=10)),
                ("payment_mode", models.CharField(default="cash", max_length=30)),
                ("split_payments", models.JSONField(blank=True, null=True)),
                ("status", models.CharField(choices=[("Saved", "Saved"), ("Billed", "Billed"), ("Paid", "Paid")], max_length=10)),
                ("items", models.JSONField(default=list)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="invoices", to="orders.order")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
