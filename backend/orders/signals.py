from django.dispatch import Signal
import logging

logger = logging.getLogger(__name__)

# Custom signals other apps can listen to. Receivers are best effort: the
# orders and billing services send these with `send_best_effort`, so a failing
# receiver is logged and never unwinds the order change that triggered it.

# Sent with `phone` and `status` when the customer-facing table status of an
# order's guest should be overwritten (e.g. "free" after checkout).
customer_table_status_changed = Signal()

# Sent with `order` after one or more of its item statuses changed.
order_item_status_changed = Signal()


def send_best_effort(signal, sender, **kwargs):
    """Send a signal robustly, logging every receiver that raised."""
    responses = signal.send_robust(sender=sender, **kwargs)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error(
                f"Receiver {getattr(receiver, '__name__', receiver)} failed: {response}"
            )
    return responses
