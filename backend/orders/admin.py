from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("name", "price", "quantity", "status", "is_veg", "notes")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "order_type", "status", "table", "total", "created_at")
    list_filter = ("status", "order_type")
    search_fields = ("customer_name", "customer_phone")
    inlines = [OrderItemInline]
