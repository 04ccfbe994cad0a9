"""
sales_engines.eligibility -- Decide whether an order item may be invoiced or refunded.

Responsibility:
    Pure predicates over the composite item tree.  A plain item is judged
    on its own remaining quantity.  A dummy parent is eligible when any of
    its children is; a dummy child follows its parent.  When the caller
    requested explicit quantities, composite items are judged on those
    requests instead of the remaining counters.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Items are consumed through the ``CompositeItem`` protocol so this module
    never imports the document models.

Invariants enforced:
    - Items locked against invoicing are never invoiceable.
    - A refund limit present for an item must be strictly positive for the
      item to be refundable, whatever its order-level remaining quantity.
    - Every item role is handled explicitly; there is no fallthrough.

Usage:
    from sales_engines.eligibility import can_invoice_item, can_refund_item

    if can_invoice_item(order_item, qtys):
        ...
    if can_refund_item(order_item, qtys, refund_limits):
        ...
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from sales_kernel.exceptions import InvalidItemStructureError
from sales_kernel.logging_config import get_logger
from sales_kernel.values import ZERO, to_quantity

logger = get_logger("engines.eligibility")


class ItemRole(str, Enum):
    """Position of an order item in the composite item tree."""

    PLAIN = "plain"  # Billed on its own quantity
    DUMMY_PARENT = "dummy_parent"  # Driven by its children
    DUMMY_CHILD = "dummy_child"  # Driven by its parent


class CompositeItem(Protocol):
    """What the predicates read from an order item."""

    item_id: Hashable
    qty_to_invoice: Decimal
    qty_to_refund: Decimal
    locked_do_invoice: bool

    @property
    def role(self) -> ItemRole: ...

    @property
    def children(self) -> Sequence["CompositeItem"]: ...

    @property
    def parent(self) -> "CompositeItem | None": ...


def _requested_positive(qtys: Mapping[Any, Any], item: CompositeItem) -> bool:
    """True if the request carries a strictly positive quantity for *item*."""
    if item.item_id not in qtys:
        return False
    return to_quantity(qtys[item.item_id]) > ZERO


def _role_of(item: CompositeItem) -> ItemRole | None:
    """The item's role, or None when its composite links are malformed."""
    try:
        return item.role
    except InvalidItemStructureError as exc:
        logger.warning("item_structure_invalid", extra={
            "item_id": exc.item_id,
            "reason": exc.reason,
        })
        return None


def _has_remaining_to_invoice(item: CompositeItem) -> bool:
    return item.qty_to_invoice > ZERO


# ============================================================================
# Invoicing
# ============================================================================


def can_invoice_item(
    item: CompositeItem,
    qtys: Mapping[Any, Any] | None = None,
) -> bool:
    """
    Check whether *item* may appear on a new invoice.

    A dummy item goes on the invoice together with its children (when it is
    the parent) or with its parent (when it is a child).
    A dummy item with malformed links is never eligible.
    """
    qtys = qtys or {}
    if item.locked_do_invoice:
        return False

    role = _role_of(item)
    if role is ItemRole.PLAIN:
        return _has_remaining_to_invoice(item)

    if role is ItemRole.DUMMY_PARENT:
        for child in item.children:
            if not qtys:
                if _has_remaining_to_invoice(child):
                    return True
            elif _requested_positive(qtys, child):
                return True
        return False

    if role is ItemRole.DUMMY_CHILD:
        parent = item.parent
        if parent is None:
            return False
        if not qtys:
            return _has_remaining_to_invoice(parent)
        return _requested_positive(qtys, parent)

    return False


# ============================================================================
# Refunding
# ============================================================================


def can_refund_plain_item(
    item: CompositeItem,
    refund_limits: Mapping[Any, Decimal] | None = None,
) -> bool:
    """
    Check a single item against its own counters, ignoring composition.

    When *refund_limits* carries an entry for the item, that entry decides:
    a non-positive limit blocks the refund even if the order still shows a
    refundable quantity.
    """
    if item.qty_to_refund < ZERO:
        return False
    if refund_limits and item.item_id in refund_limits:
        return refund_limits[item.item_id] > ZERO
    return True


def can_refund_item(
    item: CompositeItem,
    qtys: Mapping[Any, Any] | None = None,
    refund_limits: Mapping[Any, Decimal] | None = None,
) -> bool:
    """Check whether *item* may appear on a new credit memo."""
    qtys = qtys or {}
    role = _role_of(item)

    if role is ItemRole.PLAIN:
        return can_refund_plain_item(item, refund_limits)

    if role is ItemRole.DUMMY_PARENT:
        for child in item.children:
            if not qtys:
                if can_refund_plain_item(child, refund_limits):
                    return True
            elif _requested_positive(qtys, child):
                return True
        return False

    if role is ItemRole.DUMMY_CHILD:
        parent = item.parent
        if parent is None:
            return False
        if not qtys:
            return can_refund_plain_item(parent, refund_limits)
        return _requested_positive(qtys, parent)

    return False
