"""
Orders services package.

- OrderService: order lifecycle (create, transition, send to kitchen, complete)
- OrderItemService: item management (add, status updates, delete)
- derive_table_status: table status from item statuses
"""

from .order_service import OrderActionResult, OrderService
from .item_service import OrderItemService
from .status_rules import derive_table_status, parse_choice

__all__ = [
    "OrderActionResult",
    "OrderService",
    "OrderItemService",
    "derive_table_status",
    "parse_choice",
]
