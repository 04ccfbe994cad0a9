"""
Sales Document Service - Prepares draft invoices and credit memos for an order.

Thin glue layer that:
1. Calls the eligibility engine to decide which order items may be drawn
2. Resolves a quantity per item from the request or the remaining counters
3. Calls the refund-limit engine to cap refunds against one invoice
4. Calls the shipping engine for the invoice-linked shipping refund cap
5. Hands the draft to the injected totals collector

Nothing is persisted and no counters are decremented: the returned drafts
are owned by the caller.  Callers must serialize preparation and
submission for the same order, since two concurrent preparations read the
same remaining counters.

Usage:
    service = OrderDocumentService(order, convertor, totals_collector, tax_config)
    invoice = service.prepare_invoice({item.item_id: Decimal("2")})
    memo = service.prepare_invoice_creditmemo(invoice, {"qtys": {}})
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from decimal import Decimal
from typing import Any

from sales_engines.eligibility import can_invoice_item, can_refund_item
from sales_engines.refund_limits import (
    InvoicedLine,
    RefundedLine,
    aggregate_refunded_quantities,
    compute_refund_limits,
)
from sales_engines.shipping import (
    ShippingRefundCap,
    ShippingRefundInput,
    calculate_shipping_refund_cap,
)
from sales_kernel.exceptions import InvalidQuantityError
from sales_kernel.logging_config import LogContext, get_logger
from sales_kernel.values import (
    ONE,
    ZERO,
    non_negative,
    to_quantity,
    truncate_quantity,
)
from sales_modules.documents.models import (
    CreditMemo,
    Invoice,
    InvoiceItem,
    Order,
    OrderItem,
)
from sales_modules.documents.ports import Convertor, TaxDisplayConfig, TotalsCollector
from sales_modules.documents.requests import CreditMemoRequest

logger = get_logger("modules.documents.service")


class OrderDocumentService:
    """
    Prepares invoice and credit memo drafts for one order.

    Engine composition:
    - eligibility: can_invoice_item / can_refund_item
    - refund_limits: per-invoice refundable quantities
    - shipping: shipping refund cap

    Collaborators (constructor-injected): Convertor, TotalsCollector,
    TaxDisplayConfig.
    """

    def __init__(
        self,
        order: Order,
        convertor: Convertor,
        totals_collector: TotalsCollector,
        tax_config: TaxDisplayConfig,
    ):
        self._order = order
        self._convertor = convertor
        self._totals = totals_collector
        self._tax_config = tax_config

    @property
    def order(self) -> Order:
        return self._order

    def set_convertor(self, convertor: Convertor) -> OrderDocumentService:
        """Replace the convertor used for subsequent preparations."""
        self._convertor = convertor
        return self

    # =========================================================================
    # Invoices
    # =========================================================================

    def prepare_invoice(self, qtys: Mapping[Hashable, Any] | None = None) -> Invoice:
        """
        Prepare an invoice for the order.

        Eligibility follows the remaining counters only, so a bundle goes on
        the invoice whenever any of its children is still open, whatever
        *qtys* asks for.  Dummy items are invoiced with their ordered
        quantity (at least 1).  Other items take the requested quantity when
        *qtys* names them, otherwise everything still left to invoice.

        Raises:
            InvalidQuantityError: a requested quantity exceeds what is left
                to invoice.  Nothing is added to the order.
        """
        qtys = qtys or {}
        with LogContext.bind(order_id=self._order.order_id):
            logger.info("invoice_prepare_started", extra={
                "requested_items": len(qtys),
            })

            invoice = self._convertor.to_invoice(self._order)
            total_qty = ZERO
            for order_item in self._order.all_items():
                if not can_invoice_item(order_item, {}):
                    logger.debug("invoice_item_not_eligible", extra={
                        "item_id": str(order_item.item_id),
                    })
                    continue

                if order_item.is_dummy:
                    qty = order_item.qty_ordered if order_item.qty_ordered > ZERO else ONE
                elif order_item.item_id in qtys:
                    qty = to_quantity(qtys[order_item.item_id])
                else:
                    qty = order_item.qty_to_invoice

                item = self._convertor.item_to_invoice_item(order_item)
                try:
                    qty = self.set_invoice_item_quantity(item, qty)
                except InvalidQuantityError:
                    logger.warning("invoice_prepare_rejected", exc_info=True)
                    raise

                if qty <= ZERO:
                    logger.debug("invoice_item_zero_qty", extra={
                        "item_id": str(order_item.item_id),
                    })
                    continue
                total_qty += qty
                invoice.add_item(item)

            invoice.total_qty = total_qty
            invoice = self._totals.collect_totals(invoice)
            self._order.add_invoice(invoice)

            logger.info("invoice_prepared", extra={
                "line_count": len(invoice.items),
                "total_qty": str(total_qty),
            })
            return invoice

    def set_invoice_item_quantity(self, item: InvoiceItem, qty: Any) -> Decimal:
        """
        Validate *qty* for an invoice line and set it.

        Integer-only items are truncated, negatives become zero.  Dummy
        items are exempt from the remaining-quantity check.

        Returns:
            The quantity actually set.

        Raises:
            InvalidQuantityError: qty exceeds the item's qty_to_invoice.
        """
        order_item = item.order_item
        qty = to_quantity(qty)
        if not order_item.is_qty_decimal:
            qty = truncate_quantity(qty)
        qty = non_negative(qty)

        if qty > order_item.qty_to_invoice and not order_item.is_dummy:
            raise InvalidQuantityError(
                item_name=item.name or order_item.name,
                requested=str(qty),
                available=str(order_item.qty_to_invoice),
            )

        item.qty = qty
        return qty

    # =========================================================================
    # Credit memos
    # =========================================================================

    def prepare_creditmemo(self, data: Mapping[str, Any] | None = None) -> CreditMemo:
        """
        Prepare a credit memo against the order itself (no invoice).

        Dummy items are refunded with quantity 1 and get locked for shipping.
        """
        request = CreditMemoRequest.from_dict(data)
        qtys = request.qtys
        with LogContext.bind(order_id=self._order.order_id):
            logger.info("creditmemo_prepare_started", extra={
                "requested_items": len(qtys),
            })

            creditmemo = self._convertor.to_creditmemo(self._order)
            total_qty = ZERO
            for order_item in self._order.all_items():
                if not can_refund_item(order_item, qtys):
                    logger.debug("refund_item_not_eligible", extra={
                        "item_id": str(order_item.item_id),
                    })
                    continue

                if order_item.is_dummy:
                    qty = ONE
                    order_item.locked_do_ship = True
                else:
                    qty = self._requested_refund_qty(order_item, qtys)
                    if qty is None:
                        continue

                qty = non_negative(qty)
                if qty <= ZERO:
                    continue
                item = self._convertor.item_to_creditmemo_item(order_item)
                item.qty = qty
                total_qty += qty
                creditmemo.add_item(item)

            creditmemo.total_qty = total_qty
            self._init_creditmemo_data(creditmemo, request)
            creditmemo = self._totals.collect_totals(creditmemo)

            logger.info("creditmemo_prepared", extra={
                "line_count": len(creditmemo.items),
                "total_qty": str(total_qty),
            })
            return creditmemo

    def prepare_invoice_creditmemo(
        self,
        invoice: Invoice,
        data: Mapping[str, Any] | None = None,
    ) -> CreditMemo:
        """
        Prepare a credit memo against one invoice.

        Each line is capped by what the invoice billed minus what earlier
        non-canceled credit memos for the same invoice already refunded.
        Without an explicit shipping amount, shipping is set to the
        shipping refund cap.
        """
        request = CreditMemoRequest.from_dict(data)
        qtys = request.qtys
        with LogContext.bind(
            order_id=self._order.order_id,
            invoice_id=invoice.invoice_id,
        ):
            logger.info("invoice_creditmemo_prepare_started", extra={
                "requested_items": len(qtys),
            })

            refunded = aggregate_refunded_quantities(
                refunded_lines=self._refunded_lines(invoice),
            )
            refund_limits = compute_refund_limits(
                invoiced_lines=tuple(
                    InvoicedLine(order_item_id=line.order_item_id, qty=line.qty)
                    for line in invoice.all_items()
                ),
                refunded=refunded,
            )

            creditmemo = self._convertor.to_creditmemo(self._order)
            creditmemo.invoice = invoice

            total_qty = ZERO
            for invoice_item in invoice.all_items():
                order_item = invoice_item.order_item
                if not can_refund_item(order_item, qtys, refund_limits):
                    logger.debug("refund_item_not_eligible", extra={
                        "item_id": str(order_item.item_id),
                    })
                    continue

                if order_item.is_dummy:
                    qty = ONE
                else:
                    qty = self._requested_refund_qty(order_item, qtys)
                    if qty is None:
                        continue
                    if order_item.item_id in refund_limits:
                        qty = min(qty, refund_limits[order_item.item_id])
                qty = non_negative(min(qty, invoice_item.qty))
                if qty <= ZERO:
                    continue

                item = self._convertor.item_to_creditmemo_item(order_item)
                item.qty = qty
                total_qty += qty
                creditmemo.add_item(item)

            creditmemo.total_qty = total_qty
            self._init_creditmemo_data(creditmemo, request)
            if not request.has_shipping_amount:
                cap = self._shipping_refund_cap(invoice)
                creditmemo.base_shipping_amount = cap.amount
                logger.info("shipping_refund_cap_applied", extra={
                    "mode": cap.mode.value,
                    "amount": str(cap.amount),
                })

            creditmemo = self._totals.collect_totals(creditmemo)

            logger.info("creditmemo_prepared", extra={
                "line_count": len(creditmemo.items),
                "total_qty": str(total_qty),
            })
            return creditmemo

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _requested_refund_qty(
        order_item: OrderItem,
        qtys: Mapping[Hashable, Any],
    ) -> Decimal | None:
        """Requested quantity, all remaining when nothing was requested, else None."""
        if order_item.item_id in qtys:
            return to_quantity(qtys[order_item.item_id])
        if not qtys:
            return order_item.qty_to_refund
        return None

    @staticmethod
    def _init_creditmemo_data(creditmemo: CreditMemo, request: CreditMemoRequest) -> None:
        if request.shipping_amount is not None:
            creditmemo.base_shipping_amount = request.shipping_amount
        if request.adjustment_positive is not None:
            creditmemo.adjustment_positive = request.adjustment_positive
        if request.adjustment_negative is not None:
            creditmemo.adjustment_negative = request.adjustment_negative

    @staticmethod
    def _refunded_lines(invoice: Invoice) -> tuple[RefundedLine, ...]:
        """Lines of earlier credit memos that consume this invoice's quantities."""
        return tuple(
            RefundedLine(order_item_id=line.order_item_id, qty=line.qty)
            for creditmemo in invoice.order.creditmemos
            if creditmemo.counts_against(invoice)
            for line in creditmemo.all_items()
        )

    def _shipping_refund_cap(self, invoice: Invoice) -> ShippingRefundCap:
        order = invoice.order
        return calculate_shipping_refund_cap(
            refund_input=ShippingRefundInput(
                base_shipping_amount=order.base_shipping_amount,
                base_shipping_incl_tax=order.base_shipping_incl_tax,
                base_shipping_refunded=order.base_shipping_refunded,
                base_shipping_tax_refunded=order.base_shipping_tax_refunded,
                invoice_base_shipping_amount=invoice.base_shipping_amount,
                shipping_includes_tax=self._tax_config.displays_shipping_tax_inclusive(
                    order.store_id
                ),
            ),
        )
