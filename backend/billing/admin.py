from django.contrib import admin

from billing.models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "status", "total", "payment_mode", "created_at")
    list_filter = ("status", "payment_mode")
    search_fields = ("invoice_number", "customer_name", "customer_phone")
    readonly_fields = ("items", "split_payments")
