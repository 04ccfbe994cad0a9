"""
Module: sales_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines used by sales document preparation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import sales_kernel (and sibling engine modules).
    MUST NOT import sales_modules or sales_config.

Invariants enforced:
    - Decimal-only arithmetic for quantities and amounts.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from sales_engines.eligibility import can_invoice_item, can_refund_item
    from sales_engines.refund_limits import compute_refund_limits
    from sales_engines.shipping import calculate_shipping_refund_cap
"""

from sales_engines.eligibility import (
    CompositeItem,
    ItemRole,
    can_invoice_item,
    can_refund_item,
    can_refund_plain_item,
)
from sales_engines.refund_limits import (
    InvoicedLine,
    RefundedLine,
    aggregate_refunded_quantities,
    compute_refund_limits,
)
from sales_engines.shipping import (
    ShippingRefundCap,
    ShippingRefundInput,
    ShippingTaxMode,
    calculate_shipping_refund_cap,
)
from sales_engines.tracer import traced_engine

__all__ = [
    # Eligibility
    "CompositeItem",
    "ItemRole",
    "can_invoice_item",
    "can_refund_item",
    "can_refund_plain_item",
    # Refund limits
    "InvoicedLine",
    "RefundedLine",
    "aggregate_refunded_quantities",
    "compute_refund_limits",
    # Shipping
    "ShippingRefundCap",
    "ShippingRefundInput",
    "ShippingTaxMode",
    "calculate_shipping_refund_cap",
    # Tracing
    "traced_engine",
]
