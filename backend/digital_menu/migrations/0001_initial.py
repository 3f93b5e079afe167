import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DigitalMenuCustomer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("phone_number", models.CharField(db_index=True, max_length=30)),
                ("name", models.CharField(blank=True, default="", max_length=200)),
                ("table_status", models.CharField(blank=True, default="", max_length=20)),
                ("login_status", models.CharField(blank=True, default="", max_length=20)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "digital_menu_customers",
                "ordering": ["-updated_at"],
            },
        ),
        migrations.CreateModel(
            name="DigitalMenuCustomerOrders",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("customer_id", models.CharField(blank=True, default="", max_length=100)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=30)),
                ("orders", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Digital menu customer orders",
                "verbose_name_plural": "Digital menu customer orders",
                "db_table": "digital_menu_customer_orders",
                "ordering": ["-created_at"],
            },
        ),
    ]
