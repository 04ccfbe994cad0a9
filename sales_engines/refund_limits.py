"""
sales_engines.refund_limits -- How much of each invoice line can still be refunded.

Responsibility:
    Two explicit aggregation passes for invoice-linked credit memos:

    1. ``aggregate_refunded_quantities`` sums the quantities already refunded
       per order item by the prior credit memos that count against the
       invoice (the caller selects them: non-canceled, same invoice).
    2. ``compute_refund_limits`` subtracts those sums from each invoice
       line's billed quantity.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Consumes plain value
    objects so it never depends on the document models.

Invariants enforced:
    - Both results are read-only mappings built once per call.
    - ``limit[item] = invoiced[item] - refunded.get(item, 0)`` for every
      invoice line; items not on the invoice get no limit.
    - A limit may be zero or negative (over-refunded history); the
      eligibility predicates treat such a limit as "nothing left".
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from sales_engines.tracer import traced_engine
from sales_kernel.logging_config import get_logger
from sales_kernel.values import ZERO

logger = get_logger("engines.refund_limits")


@dataclass(frozen=True)
class RefundedLine:
    """One line of a prior credit memo counted against the invoice."""

    order_item_id: Hashable
    qty: Decimal


@dataclass(frozen=True)
class InvoicedLine:
    """One line of the invoice being refunded."""

    order_item_id: Hashable
    qty: Decimal


@traced_engine("refund_limits", "1.0", fingerprint_fields=("refunded_lines",))
def aggregate_refunded_quantities(
    refunded_lines: Iterable[RefundedLine],
) -> Mapping[Hashable, Decimal]:
    """Sum refunded quantity per order item."""
    totals: dict[Hashable, Decimal] = defaultdict(lambda: ZERO)
    for line in refunded_lines:
        totals[line.order_item_id] += line.qty
    return MappingProxyType(dict(totals))


@traced_engine("refund_limits", "1.0", fingerprint_fields=("invoiced_lines", "refunded"))
def compute_refund_limits(
    invoiced_lines: Iterable[InvoicedLine],
    refunded: Mapping[Hashable, Decimal],
) -> Mapping[Hashable, Decimal]:
    """Remaining refundable quantity per order item on this invoice."""
    limits: dict[Hashable, Decimal] = {}
    for line in invoiced_lines:
        limits[line.order_item_id] = line.qty - refunded.get(line.order_item_id, ZERO)

    logger.debug(
        "refund_limits_computed",
        extra={
            "limits": {str(k): str(v) for k, v in limits.items()},
        },
    )
    return MappingProxyType(limits)
