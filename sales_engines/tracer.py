"""
sales_engines.tracer -- SALES_ENGINE_TRACE records for engine calls.

``@traced_engine`` wraps a pure engine function and logs one structured
record per call: engine name and version, a fingerprint of the selected
arguments, and the call duration.  Two calls with equal inputs carry the
same fingerprint, so a credit memo can be tied back to the exact refund
limits and shipping figures it was prepared from.

Arguments are bound against the function signature, so positional and
keyword calls fingerprint identically.  The tracer only logs; inputs and
results pass through untouched.

Usage:
    from sales_engines.tracer import traced_engine

    @traced_engine("shipping_refund_cap", "1.0", fingerprint_fields=("refund_input",))
    def calculate_shipping_refund_cap(refund_input):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from sales_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

_FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """Stable text form of an engine argument."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        # 2.50 and 2.5 are the same quantity
        return str(value.normalize()) if value else "0"
    if isinstance(value, (int, float, str)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        body = ",".join(
            f"{f.name}:{_canonicalize(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({body})"
    if isinstance(value, Mapping):
        pairs = sorted((str(k), _canonicalize(v)) for k, v in value.items())
        return "{" + ",".join(f"{k}:{v}" for k, v in pairs) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """
    SHA-256 prefix over the named arguments.

    Fields absent from *arguments* are hashed as ``null``.
    """
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return digest[:_FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorate an engine function so every call emits SALES_ENGINE_TRACE."""

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind(*args, **kwargs)
                bound.apply_defaults()
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)

            started = time.monotonic()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.monotonic() - started) * 1000, 2)

            logger.info("SALES_ENGINE_TRACE", extra={
                "trace_type": "SALES_ENGINE_TRACE",
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": elapsed_ms,
                "function": func.__qualname__,
            })
            return result

        wrapper.engine_name = engine_name
        wrapper.engine_version = engine_version
        return wrapper

    return decorator
