"""
sales_config -- single public entrypoint for sales configuration.

Responsibility:
    Provides the only way to obtain configuration at runtime through
    ``get_active_config()``.  YAML loading is internal; callers receive a
    frozen ``SalesConfig``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ValueError`` / ``KeyError`` -- structural validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``SALES_CONFIG_TRACE`` log entry with the source path and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sales_config.loader import load_yaml_file, parse_sales_config
from sales_config.schema import SalesConfig, StoreTaxDisplay
from sales_config.tax_display import StoreTaxDisplayConfig

_logger = logging.getLogger("sales_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

__all__ = [
    "SalesConfig",
    "StoreTaxDisplay",
    "StoreTaxDisplayConfig",
    "get_active_config",
]


def get_active_config(config_path: Path | None = None) -> SalesConfig:
    """
    Load and validate the sales configuration.

    Args:
        config_path: Override path to a YAML file.  Defaults to the bundled
            ``sales_config/sets/default.yaml``.
    """
    path = config_path or _DEFAULT_CONFIG_PATH
    config = parse_sales_config(load_yaml_file(path))

    _logger.info(
        "SALES_CONFIG_TRACE",
        extra={
            "trace_type": "SALES_CONFIG_TRACE",
            "config_path": str(path),
            "checksum": config.checksum,
            "store_count": len(config.stores),
            "default_shipping_includes_tax": config.default_shipping_includes_tax,
        },
    )
    return config
