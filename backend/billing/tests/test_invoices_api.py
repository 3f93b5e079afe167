"""
API tests for the billing actions on orders and the invoice endpoints.
"""
import pytest

from billing.models import Invoice


@pytest.mark.django_db
class TestBillingActionsAPI:

    def test_checkout(self, api_client, order_with_items):
        response = api_client.post(
            f"/api/orders/{order_with_items.id}/checkout/",
            {"payment_mode": "card", "print": True},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["order"]["status"] == "paid"
        assert response.data["invoice"]["invoice_number"] == "INV-0001"
        assert response.data["invoice"]["total"] == "521.85"
        assert response.data["should_print"] is True
        assert response.data["completed_steps"][0] == "order_paid"

    def test_second_checkout_returns_409(self, api_client, order_with_items):
        url = f"/api/orders/{order_with_items.id}/checkout/"
        api_client.post(url, {}, format="json")

        response = api_client.post(url, {}, format="json")

        assert response.status_code == 409
        assert response.data["status"] == "paid"

    def test_split_mismatch_returns_400(self, api_client, order_with_items):
        response = api_client.post(
            f"/api/orders/{order_with_items.id}/checkout/",
            {"split_payments": [{"person": "A", "amount": "100.00"}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"] == "Split payment amounts must equal the total bill"
        assert response.data["total"] == "521.85"

    def test_save_with_print(self, api_client, order_with_items):
        response = api_client.post(
            f"/api/orders/{order_with_items.id}/save/", {"print": True}, format="json"
        )

        assert response.status_code == 200
        assert response.data["invoice"]["status"] == "Saved"

    def test_bill(self, api_client, order_with_items):
        response = api_client.post(f"/api/orders/{order_with_items.id}/bill/", {}, format="json")

        assert response.status_code == 200
        assert response.data["order"]["status"] == "billed"
        assert response.data["invoice"]["status"] == "Billed"
        assert response.data["should_print"] is False


@pytest.mark.django_db
class TestInvoicesAPI:

    def test_list_and_lookup_by_number(self, api_client, order_with_items):
        api_client.post(f"/api/orders/{order_with_items.id}/checkout/", {}, format="json")
        invoice = Invoice.objects.get()

        listing = api_client.get("/api/invoices/")
        by_number = api_client.get("/api/invoices/number/INV-0001/")
        by_id = api_client.get(f"/api/invoices/{invoice.id}/")

        assert listing.status_code == 200
        assert by_number.data["id"] == str(invoice.id)
        assert by_id.data["order_id"] == str(order_with_items.id)

    def test_unknown_number_returns_404(self, api_client):
        response = api_client.get("/api/invoices/number/INV-9999/")

        assert response.status_code == 404
        assert response.data["error"] == "Invoice not found"
