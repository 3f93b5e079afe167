from django.urls import path, include
from rest_framework.routers import DefaultRouter

from inventory.views import InventoryItemViewSet, PurchaseOrderViewSet, WastageViewSet

app_name = "inventory"

router = DefaultRouter()
router.register(r"items", InventoryItemViewSet, basename="inventory-item")
router.register(r"wastage", WastageViewSet, basename="wastage")
router.register(r"purchase-orders", PurchaseOrderViewSet, basename="purchase-order")

urlpatterns = [
    path("", include(router.urls)),
]
