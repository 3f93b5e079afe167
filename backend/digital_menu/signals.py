from django.dispatch import receiver

from digital_menu.services import mirror_customer_table_status, sync_table_status_from_order
from orders.signals import customer_table_status_changed, order_item_status_changed


@receiver(customer_table_status_changed)
def handle_customer_table_status_changed(sender, phone=None, status=None, **kwargs):
    mirror_customer_table_status(phone, status)


@receiver(order_item_status_changed)
def handle_order_item_status_changed(sender, order=None, **kwargs):
    if order is not None:
        sync_table_status_from_order(order)
