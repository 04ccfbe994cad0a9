"""
Credit memo request parsing.

Callers pass the legacy request shape::

    {
        "qtys": {item_id: qty, ...},
        "shipping_amount": "5.00",
        "adjustment_positive": "1.00",
        "adjustment_negative": "0.50",
    }

Every key is optional and ``None`` means absent.  A non-numeric
``shipping_amount`` counts as zero.  Adjustments are kept as given; whether
they are acceptable is decided elsewhere.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Self

from sales_kernel.logging_config import get_logger
from sales_kernel.values import coerce_amount

logger = get_logger("modules.documents.requests")


@dataclass(frozen=True)
class CreditMemoRequest:
    """Requested quantities and amounts for a new credit memo."""
    qtys: Mapping[Hashable, Any] = field(default_factory=dict)
    shipping_amount: Decimal | None = None
    adjustment_positive: Any = None
    adjustment_negative: Any = None

    @property
    def has_shipping_amount(self) -> bool:
        return self.shipping_amount is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Self:
        """Create a request from the dict shape (None or {} means no request)."""
        data = data or {}
        shipping_amount = data.get("shipping_amount")
        request = cls(
            qtys=dict(data.get("qtys") or {}),
            shipping_amount=(
                coerce_amount(shipping_amount) if shipping_amount is not None else None
            ),
            adjustment_positive=data.get("adjustment_positive"),
            adjustment_negative=data.get("adjustment_negative"),
        )
        logger.debug(
            "creditmemo_request_parsed",
            extra={
                "requested_items": len(request.qtys),
                "has_shipping_amount": request.has_shipping_amount,
            },
        )
        return request
