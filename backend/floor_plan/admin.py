from django.contrib import admin

from .models import Floor, Table


@admin.register(Floor)
class FloorAdmin(admin.ModelAdmin):
    list_display = ("name", "display_order")


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("number", "floor", "seats", "status", "current_order")
    list_filter = ("status", "floor")
    search_fields = ("number",)
