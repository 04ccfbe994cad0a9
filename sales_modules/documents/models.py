"""
Sales Document Domain Models (``sales_modules.documents.models``).

Responsibility
--------------
The nouns of sales document preparation: orders and their items, invoices,
credit memos and their lines.

Architecture position
---------------------
**Modules layer** -- plain data with ZERO I/O.  Orders and their items are
owned by the order aggregate; invoices and credit memos produced by
``OrderDocumentService`` are fresh drafts handed back to the caller.

Invariants enforced
-------------------
* Every order item has exactly one ``ItemRole``: a non-dummy item is PLAIN,
  a dummy item is either a DUMMY_PARENT (has children) or a DUMMY_CHILD
  (has a parent).  Any other dummy shape raises ``InvalidItemStructureError``.
* All quantities and amounts are ``Decimal``.
* Remaining-allowance counters (``qty_to_invoice``, ``qty_to_refund``) are
  maintained by whoever persists documents; preparation only reads them.

Failure modes
-------------
* ``InvalidItemStructureError`` when an order is built with a dummy item
  that has no parent and no children, or both.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from sales_engines.eligibility import ItemRole
from sales_kernel.exceptions import InvalidItemStructureError
from sales_kernel.values import ZERO, to_amount, to_quantity


class CreditMemoState(Enum):
    """Credit memo states."""
    OPEN = "open"
    REFUNDED = "refunded"
    CANCELED = "canceled"


@dataclass(eq=False)
class OrderItem:
    """A line of an order, possibly part of a composite (bundle/configurable) item."""
    item_id: Hashable
    name: str = ""
    sku: str = ""
    qty_ordered: Decimal = ZERO
    qty_to_invoice: Decimal = ZERO
    qty_to_refund: Decimal = ZERO
    is_dummy: bool = False
    is_qty_decimal: bool = False
    locked_do_invoice: bool = False
    locked_do_ship: bool = False
    children: list[OrderItem] = field(default_factory=list, repr=False)
    parent: OrderItem | None = field(default=None, repr=False)

    def __post_init__(self):
        self.qty_ordered = to_quantity(self.qty_ordered)
        self.qty_to_invoice = to_quantity(self.qty_to_invoice)
        self.qty_to_refund = to_quantity(self.qty_to_refund)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def role(self) -> ItemRole:
        """Tagged role of the item in the composite tree."""
        if not self.is_dummy:
            return ItemRole.PLAIN
        if self.has_children and self.parent is not None:
            raise InvalidItemStructureError(
                str(self.item_id), "dummy item has both a parent and children"
            )
        if self.has_children:
            return ItemRole.DUMMY_PARENT
        if self.parent is not None:
            return ItemRole.DUMMY_CHILD
        raise InvalidItemStructureError(
            str(self.item_id), "dummy item has neither a parent nor children"
        )

    def check_structure(self) -> ItemRole:
        """Return the role, raising InvalidItemStructureError if there is none."""
        return self.role

    def add_child(self, child: OrderItem) -> OrderItem:
        """Attach *child* under this item, linking both directions."""
        child.parent = self
        self.children.append(child)
        return child


@dataclass(eq=False)
class Order:
    """A customer order with its documents and shipping figures."""
    order_id: Hashable
    store_id: Hashable | None = None
    items: list[OrderItem] = field(default_factory=list)
    invoices: list[Invoice] = field(default_factory=list, repr=False)
    creditmemos: list[CreditMemo] = field(default_factory=list, repr=False)
    base_shipping_amount: Decimal = ZERO
    base_shipping_incl_tax: Decimal = ZERO
    base_shipping_refunded: Decimal = ZERO
    base_shipping_tax_refunded: Decimal = ZERO

    def __post_init__(self):
        for attr in (
            "base_shipping_amount",
            "base_shipping_incl_tax",
            "base_shipping_refunded",
            "base_shipping_tax_refunded",
        ):
            setattr(self, attr, to_amount(getattr(self, attr)))
        for item in self.items:
            item.check_structure()

    def all_items(self) -> list[OrderItem]:
        """All items, dummy parents and children included, in order."""
        return list(self.items)

    def add_item(self, item: OrderItem) -> OrderItem:
        """Add an item. Composite links must already be in place."""
        item.check_structure()
        self.items.append(item)
        return item

    def get_item(self, item_id: Hashable) -> OrderItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def add_invoice(self, invoice: Invoice) -> Invoice:
        self.invoices.append(invoice)
        return invoice

    def add_creditmemo(self, creditmemo: CreditMemo) -> CreditMemo:
        self.creditmemos.append(creditmemo)
        return creditmemo


@dataclass(eq=False)
class InvoiceItem:
    """A single line on an invoice."""
    order_item: OrderItem
    name: str = ""
    qty: Decimal = ZERO

    @property
    def order_item_id(self) -> Hashable:
        return self.order_item.item_id


@dataclass(eq=False)
class Invoice:
    """An invoice billing (part of) an order."""
    order: Order = field(repr=False)
    invoice_id: Hashable | None = None
    items: list[InvoiceItem] = field(default_factory=list)
    total_qty: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO

    def __post_init__(self):
        self.base_shipping_amount = to_amount(self.base_shipping_amount)

    def add_item(self, item: InvoiceItem) -> InvoiceItem:
        self.items.append(item)
        return item

    def all_items(self) -> list[InvoiceItem]:
        return list(self.items)


@dataclass(eq=False)
class CreditMemoItem:
    """A single line on a credit memo."""
    order_item: OrderItem
    name: str = ""
    qty: Decimal = ZERO

    @property
    def order_item_id(self) -> Hashable:
        return self.order_item.item_id


@dataclass(eq=False)
class CreditMemo:
    """A refund against an order, optionally tied to one invoice."""
    order: Order = field(repr=False)
    creditmemo_id: Hashable | None = None
    invoice: Invoice | None = field(default=None, repr=False)
    state: CreditMemoState = CreditMemoState.OPEN
    items: list[CreditMemoItem] = field(default_factory=list)
    total_qty: Decimal = ZERO
    base_shipping_amount: Decimal = ZERO
    adjustment_positive: Decimal | None = None
    adjustment_negative: Decimal | None = None

    @property
    def invoice_id(self) -> Hashable | None:
        return self.invoice.invoice_id if self.invoice is not None else None

    def add_item(self, item: CreditMemoItem) -> CreditMemoItem:
        self.items.append(item)
        return item

    def all_items(self) -> list[CreditMemoItem]:
        return list(self.items)

    def counts_against(self, invoice: Invoice) -> bool:
        """True if this memo consumes refundable quantity of *invoice*."""
        if self.state is CreditMemoState.CANCELED or self.invoice is None:
            return False
        if invoice.invoice_id is None:
            return self.invoice is invoice
        return self.invoice_id == invoice.invoice_id
