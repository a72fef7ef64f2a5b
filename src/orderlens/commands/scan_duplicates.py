"""Scan-duplicates subcommand for detecting repeated orders across all customers in a date range."""

import logging
from datetime import date
from typing import NamedTuple

from ..duplicates.scan import ScanResult, partition_by_email, scan_for_duplicates
from ..report.format import print_heading, print_orders_table, print_rule
from ..store.order_store import OrderStore
from ..utils.validation import InvalidInput, parse_date

logger = logging.getLogger(__name__)


class ScanDuplicatesArgs(NamedTuple):
    """Arguments for the scan-duplicates operation."""
    start: str | None  # YYYY-MM-DD, required
    end: str | None  # YYYY-MM-DD, defaults to today
    status: str | None
    match_quantity: bool
    admin_url: str


def do_scan_duplicates(store: OrderStore, args: ScanDuplicatesArgs) -> ScanResult:
    """Scan all orders created in a date range and print duplicate sets per customer email.

    Returns:
        Mapping from customer email to duplicate groups; empty when nothing was found

    Raises:
        InvalidInput: If the start date is missing, a date is malformed, or the range is reversed
    """
    start = parse_date(args.start, 'start')
    end = parse_date(args.end, 'end') if args.end is not None else date.today()
    if end < start:
        raise InvalidInput(f"End date {end} is before start date {start}")

    print()
    print_heading("Scanning Orders for Duplicates")
    print(f"Date Range: {start} to {end}")
    print()
    print("Fetching orders...")

    orders = store.find_in_range(start, end, status=args.status)
    if not orders:
        print(f"Warning: No orders found in date range: {start} to {end}")
        return {}

    print(f"Found {len(orders)} order(s) to analyze")
    print()
    print(f"Analyzing {len(partition_by_email(orders))} unique email addresses...")
    print()

    result = scan_for_duplicates(orders, args.match_quantity)
    logger.info("Scanned %d orders from %s to %s, duplicates for %d email(s)", len(orders), start, end,
                len(result))

    if not result:
        print("No duplicate orders found in the specified date range.")
        return result

    print_rule()
    print_heading("SCAN RESULTS")
    print(f"Found duplicates for {len(result)} email address(es)")
    print_rule()
    print()

    for email, groups in result.items():
        print_rule('-')
        print(f"{email} - {len(groups)} duplicate set(s)")
        print_rule('-')

        for set_number, group in enumerate(groups, start=1):
            print()
            print(f"Duplicate Set #{set_number}: {group.count} orders with identical items")
            item_names = [f"{item.name} (×{item.quantity})" for item in group.members[0].items]
            print(f"Items: {', '.join(item_names)}")
            print_orders_table(group.members, args.admin_url)

        print()

    print(f"Duplicate scan completed. Found duplicates for {len(result)} email address(es).")
    return result
