"""
In-memory reconciliation state for the digital menu synchronizer.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

DEFAULT_PAYMENT_STATUS = "pending"


@dataclass
class ReconciliationState:
    """
    Which external orders have been claimed for ingest, and the last
    `status` / `paymentStatus` observed for each synced one.

    Not persisted: `rehydrate` rebuilds it from the `syncedToPOS` flags the
    synchronizer writes back to the external documents.
    """

    processed_ids: Set[str] = field(default_factory=set)
    statuses: Dict[str, str] = field(default_factory=dict)
    payment_statuses: Dict[str, str] = field(default_factory=dict)
    loaded: bool = False

    def is_processed(self, order_ref: str) -> bool:
        return order_ref in self.processed_ids

    def mark_processed(self, order_ref: str, status: str, payment_status: Optional[str]):
        self.processed_ids.add(order_ref)
        self.observe(order_ref, status, payment_status)

    def forget(self, order_ref: str):
        """Undo mark_processed so the next tick retries the order."""
        self.processed_ids.discard(order_ref)
        self.statuses.pop(order_ref, None)
        self.payment_statuses.pop(order_ref, None)

    def observe(self, order_ref: str, status: str, payment_status: Optional[str]):
        self.statuses[order_ref] = status
        self.payment_statuses[order_ref] = payment_status or DEFAULT_PAYMENT_STATUS

    def previous(self, order_ref: str) -> Tuple[Optional[str], Optional[str]]:
        return self.statuses.get(order_ref), self.payment_statuses.get(order_ref)

    def clear(self):
        self.processed_ids.clear()
        self.statuses.clear()
        self.payment_statuses.clear()
        self.loaded = False

    def rehydrate(self, gateway) -> int:
        """
        Seed the state from every embedded order already flagged
        `syncedToPOS`. Returns how many orders were loaded.
        """
        count = 0
        for document in gateway.customer_documents():
            for external in document.embedded_orders():
                if external.get("syncedToPOS") is not True:
                    continue
                self.mark_processed(
                    gateway.synthetic_id(document, external),
                    external.get("status"),
                    external.get("paymentStatus"),
                )
                count += 1
        self.loaded = True
        return count
