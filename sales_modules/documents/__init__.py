"""
Sales Documents Module.

Prepares draft invoices and credit memos for an order: which items may be
billed or refunded, and how much of each.

Eligibility, refund limits and the shipping refund cap come from shared
engines; document construction and totals are injected collaborators.
"""

from sales_modules.documents.models import (
    CreditMemo,
    CreditMemoItem,
    CreditMemoState,
    Invoice,
    InvoiceItem,
    Order,
    OrderItem,
)
from sales_modules.documents.ports import Convertor, TaxDisplayConfig, TotalsCollector
from sales_modules.documents.requests import CreditMemoRequest
from sales_modules.documents.service import OrderDocumentService

__all__ = [
    "CreditMemo",
    "CreditMemoItem",
    "CreditMemoState",
    "Invoice",
    "InvoiceItem",
    "Order",
    "OrderItem",
    "Convertor",
    "TaxDisplayConfig",
    "TotalsCollector",
    "CreditMemoRequest",
    "OrderDocumentService",
]
