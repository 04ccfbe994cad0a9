"""
Collaborator ports consumed by ``OrderDocumentService``.

Document construction, monetary totals and the tax-display policy live
outside this module.  They are injected through these protocols; no
global or ambient lookups.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol, TypeVar, runtime_checkable

from sales_modules.documents.models import (
    CreditMemo,
    CreditMemoItem,
    Invoice,
    InvoiceItem,
    Order,
    OrderItem,
)

DocumentT = TypeVar("DocumentT", Invoice, CreditMemo)


# =========================================================================
# Convertor Protocol
# =========================================================================


@runtime_checkable
class Convertor(Protocol):
    """Builds empty draft documents and lines from order data."""

    def to_invoice(self, order: Order) -> Invoice:
        """Return a new draft invoice for *order*, with no lines."""
        ...

    def item_to_invoice_item(self, order_item: OrderItem) -> InvoiceItem:
        """Return a new invoice line referencing *order_item*."""
        ...

    def to_creditmemo(self, order: Order) -> CreditMemo:
        """Return a new draft credit memo for *order*, with no lines."""
        ...

    def item_to_creditmemo_item(self, order_item: OrderItem) -> CreditMemoItem:
        """Return a new credit memo line referencing *order_item*."""
        ...


# =========================================================================
# TotalsCollector Protocol
# =========================================================================


@runtime_checkable
class TotalsCollector(Protocol):
    """Computes monetary totals (price, tax, discount) of a draft document."""

    def collect_totals(self, document: DocumentT) -> DocumentT:
        """Populate totals on *document* and return it."""
        ...


# =========================================================================
# TaxDisplayConfig Protocol
# =========================================================================


@runtime_checkable
class TaxDisplayConfig(Protocol):
    """Store-level tax display settings."""

    def displays_shipping_tax_inclusive(self, store_id: Hashable | None) -> bool:
        """True if the store shows shipping prices including tax."""
        ...
