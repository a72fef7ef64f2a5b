"""Find-duplicates subcommand for detecting repeated orders of one customer."""

import logging
from typing import NamedTuple

from ..duplicates.grouper import DuplicateGroup, find_duplicates_for_customer
from ..report.format import print_heading, print_items_table, print_orders_table, print_rule, print_section
from ..store.order_store import OrderStore
from ..utils.validation import validate_email

logger = logging.getLogger(__name__)


class FindDuplicatesArgs(NamedTuple):
    """Arguments for the find-duplicates operation."""
    email: str
    status: str | None
    match_quantity: bool  # Require equal quantities, not only the same products
    admin_url: str


def do_find_duplicates(store: OrderStore, args: FindDuplicatesArgs) -> list[DuplicateGroup]:
    """Find and print sets of orders of a customer that contain exactly the same products.

    Returns:
        Duplicate groups in the order they were found; empty when there are none

    Raises:
        InvalidInput: If the email is invalid
    """
    email = validate_email(args.email)

    orders = store.find_by_email(email, status=args.status)
    if not orders:
        print(f"Warning: No orders found for email: {email}")
        return []

    if len(orders) < 2:
        print("Only one order found. No duplicates possible.")
        return []

    groups = find_duplicates_for_customer(orders, args.match_quantity)
    logger.info("Found %d duplicate set(s) among %d orders of %s", len(groups), len(orders), email)

    if not groups:
        print(f"No duplicate orders found for {email}")
        return groups

    print()
    print_heading(f"Duplicate Orders for {email}")
    print(f"Found {len(groups)} set(s) of duplicate orders")
    print()

    for set_number, group in enumerate(groups, start=1):
        print_rule()
        print(f"Duplicate Set #{set_number} - {group.count} orders with identical items")
        print_rule()

        print()
        print_section("Common Items")
        print_items_table(group.members[0].items)

        print()
        print_section("Duplicate Orders")
        print_orders_table(group.members, args.admin_url)
        print()

    print("Duplicate order search completed.")
    return groups
