"""Store-wide duplicate scan partitioned by customer email."""

import logging
from typing import Iterable

from ..orders.record import OrderRecord
from .grouper import DuplicateGroup, group_duplicates

logger = logging.getLogger(__name__)

ScanResult = dict[str, list[DuplicateGroup]]


def partition_by_email(orders: Iterable[OrderRecord]) -> dict[str, list[OrderRecord]]:
    """Split orders into per-email buckets.

    Refund records and orders without a customer email are dropped. Buckets are keyed by the email
    exactly as recorded, appear in first-seen order, and keep the relative order of their orders.
    """
    orders_by_email: dict[str, list[OrderRecord]] = {}

    for order in orders:
        # Refunds carry no billing information and are not customer orders
        if order.is_refund:
            continue

        if not order.customer_email:
            continue

        orders_by_email.setdefault(order.customer_email, []).append(order)

    return orders_by_email


def scan_for_duplicates(orders: Iterable[OrderRecord], match_quantity: bool) -> ScanResult:
    """Find duplicate orders for every customer in a batch of orders.

    The caller is expected to have restricted orders to the wanted date range and status.

    Args:
        orders: Orders of any number of customers
        match_quantity: Whether quantities are part of the comparison

    Returns:
        Mapping from customer email to that customer's duplicate groups, containing only customers with
        at least one group, in the order customers were first seen
    """
    result: ScanResult = {}

    orders_by_email = partition_by_email(orders)
    for email, customer_orders in orders_by_email.items():
        if len(customer_orders) < 2:
            continue

        groups = group_duplicates(customer_orders, match_quantity)
        if groups:
            result[email] = groups

    logger.debug("Scanned %d customers, %d with duplicates", len(orders_by_email), len(result))
    return result
