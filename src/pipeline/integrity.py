"""
Integrity reconciliation: compares what the vendors sent with what the
pipeline produced. Mismatches are reported as warnings, never raised.
"""

from typing import List

from src.models.canonical import NormalizedData
from src.models.catalog import DataIntegrityResult, IntegritySummary, SourceCounts
from src.models.sources import SourceData
from src.utils.logging_config import logger

REPORT_WIDTH = 41


def count_source_orders(sources: SourceData) -> SourceCounts:
    return SourceCounts(
        toast=sum(1 for order in sources.toast.orders if order.is_active),
        doordash=len(sources.doordash.orders),
        square=len(sources.square.orders.orders),
    )


def count_source_payments(sources: SourceData) -> SourceCounts:
    """Toast tenders on active checks minus full refunds, one per DoorDash order, all Square payments."""
    toast = 0
    for order in sources.toast.orders:
        if not order.is_active:
            continue
        for check in order.checks:
            if check.is_active:
                toast += sum(1 for payment in check.payments if not payment.is_fully_refunded)

    return SourceCounts(
        toast=toast,
        doordash=len(sources.doordash.orders),
        square=len(sources.square.payments.payments),
    )


def check_data_integrity(sources: SourceData, normalized: NormalizedData) -> DataIntegrityResult:
    warnings: List[str] = []

    source_orders = count_source_orders(sources)
    source_payments = count_source_payments(sources)
    preprocessed_orders = len(normalized.orders)
    preprocessed_payments = len(normalized.payments)

    order_ids = {order.id for order in normalized.orders}
    orders_with_payments = len({p.order_id for p in normalized.payments if p.order_id in order_ids})
    orders_without_payments = preprocessed_orders - orders_with_payments

    if preprocessed_orders != source_orders.total:
        warnings.append(
            f"Order count mismatch: {source_orders.total} source orders → {preprocessed_orders} preprocessed "
            f"(Toast: {source_orders.toast}, DoorDash: {source_orders.doordash}, Square: {source_orders.square})"
        )

    if preprocessed_payments != source_payments.total:
        warnings.append(
            f"Payment count mismatch: {source_payments.total} source payments → {preprocessed_payments} preprocessed "
            f"(Toast: {source_payments.toast}, DoorDash: {source_payments.doordash}, Square: {source_payments.square})"
        )

    if orders_without_payments > 0:
        warnings.append(f"{orders_without_payments} orders have no payments (expected 0)")

    return DataIntegrityResult(
        success=not warnings,
        warnings=warnings,
        summary=IntegritySummary(
            source_orders=source_orders,
            preprocessed_orders=preprocessed_orders,
            source_payments=source_payments,
            preprocessed_payments=preprocessed_payments,
            orders_with_payments=orders_with_payments,
            orders_without_payments=orders_without_payments,
        ),
    )


def format_data_integrity_report(result: DataIntegrityResult) -> List[str]:
    """The boxed summary, one string per line."""
    summary = result.summary

    def row(text: str) -> str:
        return f"│{text.ljust(REPORT_WIDTH)}│"

    separator = f"├{'─' * REPORT_WIDTH}┤"
    lines = [
        f"┌{'─' * REPORT_WIDTH}┐",
        row('Data Integrity Report'.center(REPORT_WIDTH)),
        separator,
    ]

    for title, counts, preprocessed, unit in (
        ('Orders', summary.source_orders, summary.preprocessed_orders, 'orders'),
        ('Payments', summary.source_payments, summary.preprocessed_payments, 'payments'),
    ):
        lines.append(row(f" {title}:"))
        lines.append(row(f"   Toast:      {counts.toast:>4} {unit}"))
        lines.append(row(f"   DoorDash:   {counts.doordash:>4} {unit}"))
        lines.append(row(f"   Square:     {counts.square:>4} {unit}"))
        lines.append(row(f"   {'─' * 23}"))
        lines.append(row(f"   Total:      {counts.total:>4} → {preprocessed:>4} preprocessed"))
        lines.append(separator)

    lines.append(row(" Payment Coverage:"))
    lines.append(row(f"   Orders with payments:     {summary.orders_with_payments:>4}"))
    lines.append(row(f"   Orders without payments:  {summary.orders_without_payments:>4}"))
    lines.append(f"└{'─' * REPORT_WIDTH}┘")
    return lines


def log_data_integrity_report(result: DataIntegrityResult) -> None:
    for line in format_data_integrity_report(result):
        logger.info(line)

    if result.success:
        logger.info("Data integrity check passed")
    else:
        for warning in result.warnings:
            logger.warning(f"Data integrity: {warning}")
