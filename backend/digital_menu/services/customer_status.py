"""
Mirror of the customer-facing table status kept on the external customer
profile. Every write here is best effort.
"""
import logging

from django.db import DatabaseError, transaction

from digital_menu.services.gateway import DigitalMenuGateway
from floor_plan.models import Table
from orders.models import Order, OrderItem

logger = logging.getLogger(__name__)


def mirror_customer_table_status(phone, status, gateway=None) -> bool:
    """
    Overwrite the table status shown to the guest with this phone number.
    Returns True when a customer profile was updated.
    """
    if not phone or not status:
        return False

    gateway = gateway or DigitalMenuGateway()
    try:
        with transaction.atomic():
            updated = gateway.set_customer_table_status(phone, str(status))
    except DatabaseError as e:
        logger.error(f"Could not update table status for customer {phone}: {e}")
        return False

    if updated:
        logger.info(f"Customer {phone} table status set to {status}")
    else:
        logger.debug(f"No digital menu customer with phone {phone}")
    return bool(updated)


def guest_table_status(item_statuses):
    """
    Table status shown to the guest for an order's item statuses.

    Coarser than the POS table status: once any dish is preparing or ready
    the guest sees `preparing` until everything is ready. No items -> None.
    """
    statuses = list(item_statuses)
    if not statuses:
        return None

    ItemStatus = OrderItem.ItemStatus
    if all(s == ItemStatus.SERVED for s in statuses):
        return Table.TableStatus.SERVED
    if all(s in (ItemStatus.READY, ItemStatus.SERVED) for s in statuses):
        return Table.TableStatus.READY
    if any(s in (ItemStatus.PREPARING, ItemStatus.READY) for s in statuses):
        return Table.TableStatus.PREPARING
    return Table.TableStatus.OCCUPIED


def sync_table_status_from_order(order_id, gateway=None) -> bool:
    """Work out the guest-facing status from the order's items and mirror it."""
    order = order_id if isinstance(order_id, Order) else Order.objects.filter(pk=order_id).first()
    if order is None or not order.customer_phone:
        return False

    status = guest_table_status(order.items.values_list("status", flat=True))
    if status is None:
        return False
    return mirror_customer_table_status(order.customer_phone, status, gateway=gateway)
