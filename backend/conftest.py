"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from notifications.services import BroadcastService


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def in_memory_channel_layer(settings):
    """Never talk to Redis from tests, whatever the environment says."""
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}


# ============================================================================
# CLIENTS AND CAPTURE HELPERS
# ============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def broadcasts(monkeypatch):
    """
    Record every broadcast as an (event, payload) tuple instead of sending it.

    Broadcasts queued with broadcast_on_commit only land here once the
    on-commit callbacks run, so pair this with
    `django_capture_on_commit_callbacks(execute=True)`.
    """
    events = []

    def record(event, payload=None):
        events.append((event, payload))

    monkeypatch.setattr(BroadcastService, "broadcast", staticmethod(record))
    return events


@pytest.fixture
def event_names(broadcasts):
    """Callable returning just the event names recorded so far, in order."""
    return lambda: [event for event, _ in broadcasts]


# ============================================================================
# FLOOR PLAN / MENU FIXTURES
# ============================================================================

@pytest.fixture
def ground_floor():
    from floor_plan.models import Floor

    return Floor.objects.create(name="Ground Floor", display_order=1)


@pytest.fixture
def first_floor():
    from floor_plan.models import Floor

    return Floor.objects.create(name="First Floor", display_order=2)


@pytest.fixture
def table(ground_floor):
    from floor_plan.models import Table

    return Table.objects.create(number="5", seats=4, floor=ground_floor)


@pytest.fixture
def paneer_tikka():
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Paneer Tikka", category="Starters", price=Decimal("199.00"), is_veg=True
    )


@pytest.fixture
def dal_makhani():
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Dal Makhani", category="Mains", price=Decimal("99.00"), is_veg=True
    )


@pytest.fixture
def chicken_biryani():
    from menu.models import MenuItem

    return MenuItem.objects.create(
        name="Chicken Biryani", category="Mains", price=Decimal("250.00"), is_veg=False
    )


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def dine_in_order(table):
    """A saved dine-in order occupying `table`, with no items."""
    from orders.services import OrderService

    return OrderService.create_order(order_type="dine-in", table=table.id)


@pytest.fixture
def order_with_items(dine_in_order, paneer_tikka, dal_makhani):
    """
    Dine-in order with 2 x Paneer Tikka (199.00) and 1 x Dal Makhani (99.00).
    Total 497.00.
    """
    from orders.services import OrderItemService, OrderService

    OrderItemService.add_item(dine_in_order.id, menu_item=paneer_tikka.id, quantity=2)
    OrderItemService.add_item(dine_in_order.id, menu_item=dal_makhani.id, quantity=1)
    return OrderService.get_order(dine_in_order.id)
