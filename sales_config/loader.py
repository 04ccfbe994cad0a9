"""
Configuration Loader (``sales_config.loader``).

Responsibility
--------------
Loads YAML configuration files and parses them into the frozen
``sales_config.schema`` types.  Runtime callers go through
``sales_config.get_active_config()`` instead of calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``store_id``  -> ``KeyError`` propagates.
* Non-boolean flags, duplicate store ids  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from sales_config.schema import SalesConfig, StoreTaxDisplay


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_flag(value: Any, name: str) -> bool:
    """Parse a YAML boolean, rejecting anything that is not one."""
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return value


def parse_store_tax_display(data: dict[str, Any]) -> StoreTaxDisplay:
    """Parse one entry of the ``stores`` list."""
    return StoreTaxDisplay(
        store_id=data["store_id"],
        shipping_includes_tax=parse_flag(
            data.get("shipping_includes_tax", False), "shipping_includes_tax"
        ),
    )


def parse_sales_config(data: dict[str, Any]) -> SalesConfig:
    """Parse a whole configuration document."""
    default = data.get("default") or {}
    stores = tuple(parse_store_tax_display(s) for s in data.get("stores") or [])

    seen: set[Any] = set()
    for store in stores:
        if store.store_id in seen:
            raise ValueError(f"duplicate store_id in stores: {store.store_id!r}")
        seen.add(store.store_id)

    return SalesConfig(
        default_shipping_includes_tax=parse_flag(
            default.get("shipping_includes_tax", False),
            "default.shipping_includes_tax",
        ),
        stores=stores,
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of *data*."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
