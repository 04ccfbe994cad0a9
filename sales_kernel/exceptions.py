"""
Typed exception hierarchy for the sales kernel.

Every error carries a ``code`` class attribute (machine-readable, stable
across message rewording) and keeps its context as instance attributes so
the structured log formatter can emit it field by field.

    SalesKernelError (base)
    |
    +-- QuantityError
    |   +-- InvalidQuantityError
    |
    +-- ItemStructureError
        +-- InvalidItemStructureError

Code                    | When raised
------------------------|-----------------------------------------------
INVALID_QUANTITY        | Requested invoice qty exceeds what is left to invoice
INVALID_ITEM_STRUCTURE  | Composite (dummy) item with neither parent nor children

Items that simply cannot be placed on a document (not eligible, not
requested, nothing left) are NOT errors: preparation leaves them out.
"""


class SalesKernelError(Exception):
    """
    Base exception for all sales kernel errors.

    All subclasses must have a `code` class attribute.
    """

    code: str = "SALES_KERNEL_ERROR"


# Quantity-related exceptions


class QuantityError(SalesKernelError):
    """Base exception for quantity errors."""

    code: str = "QUANTITY_ERROR"


class InvalidQuantityError(QuantityError):
    """Requested quantity exceeds the remaining invoiceable quantity."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, item_name: str, requested: str, available: str):
        self.item_name = item_name
        self.requested = requested
        self.available = available
        super().__init__(
            f'We found an invalid quantity to invoice item "{item_name}": '
            f"requested {requested}, available {available}"
        )


# Item structure exceptions


class ItemStructureError(SalesKernelError):
    """Base exception for order item structure errors."""

    code: str = "ITEM_STRUCTURE_ERROR"


class InvalidItemStructureError(ItemStructureError):
    """Order item has a shape that maps to no item role."""

    code: str = "INVALID_ITEM_STRUCTURE"

    def __init__(self, item_id: str, reason: str):
        self.item_id = item_id
        self.reason = reason
        super().__init__(f"Invalid structure for order item {item_id}: {reason}")
