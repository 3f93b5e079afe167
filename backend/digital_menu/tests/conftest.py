import pytest

from digital_menu.models import DigitalMenuCustomer, DigitalMenuCustomerOrders
from digital_menu.services import DigitalMenuSyncService, digital_menu_sync

GUEST_PHONE = "9811122233"


@pytest.fixture(autouse=True)
def reset_digital_menu_sync():
    """The module-level synchronizer is shared; never let state leak between tests."""
    digital_menu_sync.stop()
    digital_menu_sync.state.clear()
    yield
    digital_menu_sync.stop()
    digital_menu_sync.state.clear()


@pytest.fixture
def sync_service():
    return DigitalMenuSyncService()


@pytest.fixture
def external_order():
    """
    Factory for one embedded order in the digital menu's own vocabulary.
    Items: 2 x Paneer Tikka at 199.00 and 1 x an off-menu dish at 50.00.
    """

    def build(**overrides):
        order = {
            "_id": "dm-1001",
            "orderDate": "2024-05-01T19:00:00.000Z",
            "status": "pending",
            "paymentStatus": "pending",
            "paymentMethod": "Cash",
            "tableNumber": "5",
            "floorNumber": "Ground Floor",
            "items": [
                {
                    "menuItemName": "paneer tikka",
                    "quantity": 2,
                    "price": 199,
                    "notes": "less oil",
                    "spiceLevel": "medium",
                },
                {"menuItemName": "Chef's Surprise", "quantity": 1, "price": 50},
            ],
            "tax": 22.4,
            "total": 470.4,
        }
        order.update(overrides)
        return order

    return build


@pytest.fixture
def make_document():
    def build(*orders, name="Meera", phone=GUEST_PHONE, **fields):
        return DigitalMenuCustomerOrders.objects.create(
            customer_id=fields.pop("customer_id", "cust-1"),
            customer_name=name,
            customer_phone=phone,
            orders=list(orders),
            **fields,
        )

    return build


@pytest.fixture
def update_external():
    """Edit one embedded order in place, the way the digital menu would."""

    def apply(document, index=0, **changes):
        document.refresh_from_db()
        document.orders[index].update(changes)
        document.save()
        return document

    return apply


@pytest.fixture
def guest_profile():
    return DigitalMenuCustomer.objects.create(
        phone_number=GUEST_PHONE, name="Meera", table_status="free", login_status="loggedin"
    )
