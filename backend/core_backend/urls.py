"""
URL configuration for core_backend project.

Each app registers its own router; the orders app is mounted at "api/" because
it exposes both the `orders` and `order-items` endpoints.
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/", include("floor_plan.urls")),
    path("api/", include("orders.urls")),
    path("api/", include("billing.urls")),
    path("api/inventory/", include("inventory.urls")),
    path("api/digital-menu/", include("digital_menu.urls")),
]
