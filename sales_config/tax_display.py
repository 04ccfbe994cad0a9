"""
Configuration-backed tax display settings.

``StoreTaxDisplayConfig`` satisfies the ``TaxDisplayConfig`` port expected
by ``OrderDocumentService``: per-store flags first, then the default.
"""

from __future__ import annotations

from collections.abc import Hashable

from sales_config.schema import SalesConfig
from sales_kernel.logging_config import get_logger

logger = get_logger("config.tax_display")


class StoreTaxDisplayConfig:
    """Answers tax display questions from a ``SalesConfig``."""

    def __init__(self, config: SalesConfig):
        self._config = config

    def displays_shipping_tax_inclusive(self, store_id: Hashable | None) -> bool:
        store = self._config.for_store(store_id)
        if store is None:
            logger.debug("tax_display_store_default", extra={
                "store_id": str(store_id),
            })
            return self._config.default_shipping_includes_tax
        return store.shipping_includes_tax
