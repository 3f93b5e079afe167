"""
Error handling tests: domain exceptions rendered by the DRF exception handler.
"""
from types import SimpleNamespace

import pytest

from core_backend.exceptions import (
    BusinessRuleConflict,
    NotFound,
    OrderStateConflict,
    POSError,
    ValidationFailure,
    pos_exception_handler,
)


def handle(exc):
    request = SimpleNamespace(method="POST", path="/api/orders/x/checkout/")
    return pos_exception_handler(exc, {"request": request})


class TestExceptionHandler:

    def test_not_found_is_404(self):
        response = handle(NotFound("Order", "abc"))

        assert response.status_code == 404
        assert response.data == {"error": "Order not found", "id": "abc"}

    def test_validation_failure_is_400_with_details(self):
        response = handle(ValidationFailure("bad split", details={"total": "210.00"}))

        assert response.status_code == 400
        assert response.data == {"error": "bad split", "total": "210.00"}

    def test_validation_failure_is_a_value_error(self):
        assert isinstance(ValidationFailure("x"), ValueError)

    def test_business_rule_conflict_is_409(self):
        assert handle(BusinessRuleConflict("already received")).status_code == 409

    def test_order_state_conflict_reports_current_status(self):
        order = SimpleNamespace(id="1234", status="completed")

        response = handle(OrderStateConflict(order, "saved"))

        assert response.status_code == 409
        assert response.data == {
            "error": "Cannot transition order from completed to saved.",
            "order_id": "1234",
            "status": "completed",
        }

    def test_base_error_defaults_to_400(self):
        assert handle(POSError("nope")).status_code == 400

    def test_other_exceptions_fall_through(self):
        assert handle(RuntimeError("boom")) is None


@pytest.mark.django_db
class TestHealthCheck:

    def test_health(self, client):
        response = client.get("/api/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
