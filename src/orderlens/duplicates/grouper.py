"""Grouping of orders that share an item signature."""

from typing import Iterable, Sequence

from ..orders.record import OrderRecord
from .signature import Signature, build_signature


class DuplicateGroup:
    """Orders within one scope that share the same signature.

    Attributes:
        signature: Signature common to all members
        members: Member orders in the order they were encountered in the input. Always at least two.
    """

    def __init__(self, signature: Signature, members: Sequence[OrderRecord]):
        self.signature = signature
        self.members = tuple(members)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def order_ids(self) -> list:
        return [order.order_id for order in self.members]

    def __repr__(self) -> str:
        return f"DuplicateGroup(signature={self.signature!r}, order_ids={self.order_ids!r})"


def group_duplicates(orders: Iterable[OrderRecord], match_quantity: bool) -> list[DuplicateGroup]:
    """Group orders by signature and keep the groups with more than one member.

    Orders without a signature and refund records are skipped. Members keep their relative input
    order, and groups are returned in the order their signature was first seen.

    Args:
        orders: Orders forming one comparison scope
        match_quantity: Whether quantities are part of the comparison

    Returns:
        List of duplicate groups, empty if no two orders share a signature
    """
    # dicts keep insertion order, which gives first-seen group ordering
    orders_by_signature: dict[Signature, list[OrderRecord]] = {}

    for order in orders:
        if order.is_refund:
            continue

        signature = build_signature(order, match_quantity)
        if signature is None:
            continue

        orders_by_signature.setdefault(signature, []).append(order)

    return [
        DuplicateGroup(signature, members)
        for signature, members in orders_by_signature.items()
        if len(members) > 1
    ]


def find_duplicates_for_customer(orders: Iterable[OrderRecord], match_quantity: bool) -> list[DuplicateGroup]:
    """Find duplicate groups among the orders of a single customer.

    The caller is responsible for restricting orders to one customer (and to any status filter).
    """
    return group_duplicates(orders, match_quantity)
