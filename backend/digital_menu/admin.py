from django.contrib import admin

from digital_menu.models import DigitalMenuCustomer, DigitalMenuCustomerOrders


@admin.register(DigitalMenuCustomerOrders)
class DigitalMenuCustomerOrdersAdmin(admin.ModelAdmin):
    list_display = ("customer_name", "customer_phone", "customer_id", "created_at")
    search_fields = ("customer_name", "customer_phone", "customer_id")


@admin.register(DigitalMenuCustomer)
class DigitalMenuCustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone_number", "table_status", "login_status", "updated_at")
    list_filter = ("table_status", "login_status")
    search_fields = ("name", "phone_number")
