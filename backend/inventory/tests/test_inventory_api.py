"""
API tests for the inventory endpoints.
"""
from decimal import Decimal

import pytest
from django.utils import timezone

from inventory.models import InventoryItem, PurchaseOrder, PurchaseOrderItem, Supplier


@pytest.fixture
def rice():
    return InventoryItem.objects.create(
        name="Basmati Rice", unit="kg", current_stock=Decimal("20"), min_stock=Decimal("5")
    )


@pytest.mark.django_db
class TestInventoryAPI:

    def test_list_items(self, api_client, rice):
        response = api_client.get("/api/inventory/items/")

        assert response.status_code == 200
        assert response.data[0]["name"] == "Basmati Rice"
        assert response.data[0]["is_low_stock"] is False

    def test_record_wastage(self, api_client, rice):
        response = api_client.post(
            "/api/inventory/wastage/",
            {"inventory_item": rice.id, "quantity": "2.5", "unit": "kg", "reason": "Weevils"},
            format="json",
        )

        assert response.status_code == 201
        rice.refresh_from_db()
        assert rice.current_stock == Decimal("17.5")

        history = api_client.get(f"/api/inventory/items/{rice.id}/history/")
        assert history.data[0]["operation_type"] == "WASTAGE"

    def test_wastage_beyond_stock_returns_400(self, api_client, rice):
        response = api_client.post(
            "/api/inventory/wastage/",
            {"inventory_item": rice.id, "quantity": "25", "unit": "kg", "reason": "Flood"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["available"] == "20.000"

    def test_receive_purchase_order(self, api_client, rice):
        supplier = Supplier.objects.create(name="Grain Co")
        purchase_order = PurchaseOrder.objects.create(
            order_number="PO-7", supplier=supplier, order_date=timezone.now()
        )
        PurchaseOrderItem.objects.create(
            purchase_order=purchase_order, inventory_item=rice, quantity=Decimal("10"), unit="kg"
        )
        url = f"/api/inventory/purchase-orders/{purchase_order.id}/receive/"

        first = api_client.post(url)
        second = api_client.post(url)

        assert first.status_code == 200
        assert first.data["status"] == "received"
        assert second.status_code == 409
        rice.refresh_from_db()
        assert rice.current_stock == Decimal("30")
