"""
Sales configuration schema.

YAML fragments are parsed into these frozen types by the loader; the
runtime consumes them through ``get_active_config()``.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class StoreTaxDisplay:
    """Tax display settings for one store."""

    store_id: Hashable
    shipping_includes_tax: bool = False


@dataclass(frozen=True)
class SalesConfig:
    """Parsed sales configuration."""

    default_shipping_includes_tax: bool = False
    stores: tuple[StoreTaxDisplay, ...] = field(default_factory=tuple)
    checksum: str = ""

    def for_store(self, store_id: Hashable | None) -> StoreTaxDisplay | None:
        for store in self.stores:
            if store.store_id == store_id:
                return store
        return None
