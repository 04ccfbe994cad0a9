"""
Sales Kernel

Shared foundation for sales document preparation:
- Structured JSON logging with request-scoped context
- Typed exception hierarchy with machine-readable codes
- Decimal quantity and amount coercion
"""

__version__ = "0.1.0"
