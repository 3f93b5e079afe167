"""
Closed status vocabularies and the table-status derivation rule.
"""
from floor_plan.models import Table
from orders.models import OrderItem
from core_backend.exceptions import ValidationFailure


def parse_choice(value, choices, label):
    """
    Return `value` as a member of the given TextChoices, rejecting anything
    outside the vocabulary.
    """
    if isinstance(value, str):
        value = value.strip()
    if value not in choices.values:
        raise ValidationFailure(
            f"'{value}' is not a valid {label}.",
            details={"allowed": list(choices.values)},
        )
    return choices(value)


def derive_table_status(item_statuses):
    """
    Derive a table status from the statuses of an order's items.

    Precedence, highest first: all served -> served; all ready or served ->
    ready; any preparing -> preparing; any new -> occupied. An order with no
    items derives nothing and returns None.
    """
    statuses = list(item_statuses)
    if not statuses:
        return None

    ItemStatus = OrderItem.ItemStatus
    if all(s == ItemStatus.SERVED for s in statuses):
        return Table.TableStatus.SERVED
    if all(s in (ItemStatus.READY, ItemStatus.SERVED) for s in statuses):
        return Table.TableStatus.READY
    if any(s == ItemStatus.PREPARING for s in statuses):
        return Table.TableStatus.PREPARING
    if any(s == ItemStatus.NEW for s in statuses):
        return Table.TableStatus.OCCUPIED
    return None
