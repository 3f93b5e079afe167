from django.contrib import admin

from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "is_veg", "is_available")
    list_filter = ("category", "is_veg", "is_available")
    search_fields = ("name",)
