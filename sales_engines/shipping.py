"""
sales_engines.shipping -- Shipping refund cap for invoice-linked credit memos.

Responsibility:
    Compute the maximum base shipping amount a new credit memo tied to one
    invoice may refund, given what the order charged and already refunded.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The tax-display flag is
    resolved by the caller and passed in.

Invariants enforced:
    - Tax-inclusive display: cap = shipping incl. tax - shipping refunded
      - shipping tax refunded.
    - Tax-exclusive display: cap = shipping - shipping refunded, never more
      than the invoice's own shipping amount.
    - Decimal-only arithmetic.

Usage:
    from sales_engines.shipping import ShippingRefundInput, calculate_shipping_refund_cap

    cap = calculate_shipping_refund_cap(
        refund_input=ShippingRefundInput(
            base_shipping_amount=Decimal("20"),
            base_shipping_refunded=Decimal("5"),
            invoice_base_shipping_amount=Decimal("10"),
            shipping_includes_tax=False,
        )
    )
    cap.amount  # Decimal("10")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from sales_engines.tracer import traced_engine
from sales_kernel.logging_config import get_logger

logger = get_logger("engines.shipping")


class ShippingTaxMode(str, Enum):
    """How the store displays shipping prices."""

    INCLUDING_TAX = "including_tax"
    EXCLUDING_TAX = "excluding_tax"


@dataclass(frozen=True)
class ShippingRefundInput:
    """Order and invoice shipping figures, all in base currency."""

    base_shipping_amount: Decimal = Decimal("0")
    base_shipping_incl_tax: Decimal = Decimal("0")
    base_shipping_refunded: Decimal = Decimal("0")
    base_shipping_tax_refunded: Decimal = Decimal("0")
    invoice_base_shipping_amount: Decimal = Decimal("0")
    shipping_includes_tax: bool = False

    @property
    def mode(self) -> ShippingTaxMode:
        if self.shipping_includes_tax:
            return ShippingTaxMode.INCLUDING_TAX
        return ShippingTaxMode.EXCLUDING_TAX


@dataclass(frozen=True)
class ShippingRefundCap:
    """Result of the cap calculation."""

    amount: Decimal
    mode: ShippingTaxMode


@traced_engine("shipping_refund_cap", "1.0", fingerprint_fields=("refund_input",))
def calculate_shipping_refund_cap(refund_input: ShippingRefundInput) -> ShippingRefundCap:
    """Maximum base shipping refundable on a credit memo for one invoice."""
    if refund_input.mode is ShippingTaxMode.INCLUDING_TAX:
        amount = (
            refund_input.base_shipping_incl_tax
            - refund_input.base_shipping_refunded
            - refund_input.base_shipping_tax_refunded
        )
    else:
        amount = refund_input.base_shipping_amount - refund_input.base_shipping_refunded
        amount = min(amount, refund_input.invoice_base_shipping_amount)

    logger.debug(
        "shipping_refund_cap_calculated",
        extra={
            "mode": refund_input.mode.value,
            "amount": str(amount),
        },
    )
    return ShippingRefundCap(amount=amount, mode=refund_input.mode)
