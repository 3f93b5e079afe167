"""
Digital menu synchronizer.

A polling reconciliation loop between the external digital-menu documents
and the POS. Each tick runs two passes:

* ingest: every new (pending/confirmed) external order that has not been
  synced is converted into a native POS order exactly once;
* update: status and payment-status changes on synced orders are pushed to
  the native order, and an `invoice_generated` payment status triggers an
  automatic checkout.

Ticks never overlap and never raise.
"""
from typing import Optional
import logging
import threading

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import close_old_connections, transaction

from billing.services import DEFAULT_PAYMENT_MODE, BillingService
from digital_menu.services.conversion import DigitalMenuOrderConverter
from digital_menu.services.gateway import DigitalMenuGateway
from digital_menu.services.state import DEFAULT_PAYMENT_STATUS, ReconciliationState
from notifications.services import broadcast_on_commit
from orders.models import Order, OrderItem
from orders.services import OrderItemService

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 5000

INGESTIBLE_STATUSES = ("pending", "confirmed")

INVOICE_GENERATED = ("invoice_generated", "invoice generated")

# External order status -> status applied to every item of the POS order.
ITEM_STATUS_BY_EXTERNAL_STATUS = {
    "pending": OrderItem.ItemStatus.NEW,
    "confirmed": OrderItem.ItemStatus.NEW,
    "preparing": OrderItem.ItemStatus.PREPARING,
    "completed": OrderItem.ItemStatus.SERVED,
    "cancelled": OrderItem.ItemStatus.SERVED,
}

# POS orders in these statuses are never checked out again.
SETTLED_STATUSES = (
    Order.OrderStatus.BILLED,
    Order.OrderStatus.PAID,
    Order.OrderStatus.COMPLETED,
)


def is_invoice_generated(value) -> bool:
    return isinstance(value, str) and value.strip().lower() in INVOICE_GENERATED


def item_status_for(external_status) -> str:
    return ITEM_STATUS_BY_EXTERNAL_STATUS.get(external_status, OrderItem.ItemStatus.NEW)


class DigitalMenuSyncService:

    def __init__(self, gateway=None, state: Optional[ReconciliationState] = None, converter=None):
        self.gateway = gateway or DigitalMenuGateway()
        self.state = state if state is not None else ReconciliationState()
        self.converter = converter or DigitalMenuOrderConverter(gateway=self.gateway)
        self.interval_ms = DEFAULT_INTERVAL_MS
        self._running = False
        self._thread = None
        self._stop_event = threading.Event()
        self._lifecycle_lock = threading.Lock()
        self._tick_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, interval_ms: Optional[int] = None) -> bool:
        """
        Start polling on a daemon thread: rehydrate the state, run a tick
        right away, then one every `interval_ms`. Returns False when the
        synchronizer was already running.
        """
        with self._lifecycle_lock:
            if self._running:
                logger.info("Digital menu sync is already running")
                return False

            self.interval_ms = int(
                interval_ms or getattr(settings, "DIGITAL_MENU_SYNC_INTERVAL_MS", DEFAULT_INTERVAL_MS)
            )
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event, self.interval_ms / 1000.0),
                name="digital-menu-sync",
                daemon=True,
            )
            self._running = True
            self._thread.start()

        logger.info(f"Digital menu sync started (every {self.interval_ms} ms)")
        return True

    def stop(self, timeout: Optional[float] = 5.0) -> bool:
        """Stop polling. Returns False when the synchronizer was not running."""
        with self._lifecycle_lock:
            if not self._running:
                return False
            self._running = False
            self._stop_event.set()
            thread, self._thread = self._thread, None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Digital menu sync stopped")
        return True

    def _run(self, stop_event: threading.Event, interval_seconds: float):
        try:
            try:
                self.load_sync_state()
            except Exception as e:
                # sync_orders retries the load while state.loaded is False
                logger.error(f"Could not load digital menu sync state, will retry: {e}")
            finally:
                close_old_connections()
            while not stop_event.is_set():
                close_old_connections()
                self.sync_orders()
                if stop_event.wait(interval_seconds):
                    break
        except Exception as e:
            logger.exception(f"Digital menu sync thread crashed: {e}")
            with self._lifecycle_lock:
                if self._stop_event is stop_event:
                    self._running = False
        finally:
            close_old_connections()

    def get_sync_status(self) -> dict:
        return {
            "is_running": self._running,
            "processed_orders": len(self.state.processed_ids),
        }

    def load_sync_state(self) -> int:
        """Rebuild the reconciliation state from the persisted `syncedToPOS` flags."""
        count = self.state.rehydrate(self.gateway)
        logger.info(f"Loaded {count} previously synced digital menu orders")
        return count

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def sync_orders(self) -> int:
        """
        Run one reconciliation tick. Returns the number of orders ingested
        plus the number updated; 0 when the tick was skipped or failed.
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.info("Previous digital menu sync is still running; skipping this tick")
            return 0

        try:
            if not self.state.loaded:
                self.load_sync_state()
            synced = self._ingest_new_orders()
            updated = self._apply_external_updates()
        except Exception as e:
            logger.exception(f"Digital menu sync failed: {e}")
            return 0
        finally:
            self._tick_lock.release()

        if synced or updated:
            logger.info(f"Digital menu sync: {synced} new, {updated} updated")
            broadcast_on_commit(
                "digital_menu_synced", {"new_orders": synced, "updated_orders": updated}
            )
        return synced + updated

    def _ingest_new_orders(self) -> int:
        synced = 0
        for document in self.gateway.customer_documents():
            for external in document.embedded_orders():
                if external.get("syncedToPOS") is True:
                    continue
                if external.get("status") not in INGESTIBLE_STATUSES:
                    continue

                order_ref = self.gateway.synthetic_id(document, external)
                if self.state.is_processed(order_ref):
                    continue

                # Claimed before converting so a concurrent pass cannot pick it up.
                self.state.mark_processed(
                    order_ref, external.get("status"), external.get("paymentStatus")
                )
                try:
                    with transaction.atomic():
                        pos_order = self.converter.convert(document, external)
                        self.gateway.mark_synced(document.pk, order_ref, pos_order.id)
                except Exception as e:
                    self.state.forget(order_ref)
                    logger.error(f"Failed to sync digital menu order {order_ref}: {e}")
                    continue

                synced += 1
                logger.info(f"Synced digital menu order {order_ref} as POS order {pos_order.id}")
                broadcast_on_commit(
                    "digital_menu_order_synced",
                    {
                        "order_id": order_ref,
                        "pos_order_id": pos_order.id,
                        "customer_name": document.customer_name,
                        "status": external.get("status"),
                    },
                )
        return synced

    def _apply_external_updates(self) -> int:
        updated = 0
        for document in self.gateway.customer_documents():
            for external in document.embedded_orders():
                if external.get("syncedToPOS") is not True:
                    continue

                order_ref = self.gateway.synthetic_id(document, external)
                try:
                    with transaction.atomic():
                        changed = self._apply_external_update(document, order_ref, external)
                    if changed:
                        updated += 1
                except Exception as e:
                    logger.error(f"Failed to update POS order for digital menu order {order_ref}: {e}")
        return updated

    def _apply_external_update(self, document, order_ref: str, external: dict) -> bool:
        status = external.get("status")
        payment_status = external.get("paymentStatus") or DEFAULT_PAYMENT_STATUS
        previous_status, previous_payment_status = self.state.previous(order_ref)
        pos_order = self._linked_order(external)

        if (
            pos_order is not None
            and (is_invoice_generated(payment_status) or is_invoice_generated(status))
            and pos_order.status not in SETTLED_STATUSES
        ):
            self.auto_checkout(pos_order, external)
            self.state.observe(order_ref, status, payment_status)
            return True

        status_changed = previous_status is not None and previous_status != status
        payment_changed = (
            previous_payment_status is not None and previous_payment_status != payment_status
        )
        if status_changed or payment_changed:
            self.update_pos_order(pos_order, order_ref, external)
            self.state.observe(order_ref, status, payment_status)
            broadcast_on_commit(
                "digital_menu_order_updated",
                {
                    "order_id": order_ref,
                    "customer_name": document.customer_name,
                    "previous_status": previous_status,
                    "new_status": status,
                    "previous_payment_status": previous_payment_status,
                    "new_payment_status": payment_status,
                },
            )
            return True

        if previous_status is None or previous_payment_status is None:
            self.state.observe(order_ref, status, payment_status)
        return False

    @staticmethod
    def _linked_order(external: dict) -> Optional[Order]:
        pos_order_id = external.get("posOrderId")
        if not pos_order_id:
            return None
        try:
            return Order.objects.filter(pk=pos_order_id).first()
        except (ValidationError, ValueError, TypeError):
            logger.warning(f"Digital menu order links to invalid POS order id {pos_order_id}")
            return None

    def update_pos_order(self, pos_order: Optional[Order], order_ref: str, external: dict):
        """Push an external status change to every item of the linked POS order."""
        if pos_order is None:
            logger.warning(f"Digital menu order {order_ref} has no POS order to update")
            return
        if is_invoice_generated(external.get("paymentStatus")) or is_invoice_generated(
            external.get("status")
        ):
            logger.debug(f"POS order {pos_order.id} is already {pos_order.status}; nothing to check out")
            return

        item_status = item_status_for(external.get("status"))
        changed = OrderItemService.update_order_items_status(pos_order.id, item_status)
        logger.info(
            f"Digital menu order {order_ref} is {external.get('status')}: "
            f"{len(changed)} item(s) of POS order {pos_order.id} set to {item_status}"
        )

    @staticmethod
    def auto_checkout(pos_order: Order, external: dict):
        payment_mode = str(external.get("paymentMethod") or DEFAULT_PAYMENT_MODE).lower()
        result = BillingService.checkout(pos_order.id, payment_mode=payment_mode)
        logger.info(
            f"Auto-checked out POS order {pos_order.id} with invoice "
            f"{result.invoice.invoice_number} ({payment_mode})"
        )
        return result


digital_menu_sync = DigitalMenuSyncService()
