"""By-email subcommand for listing the orders of a customer."""

from typing import NamedTuple

from ..orders.record import OrderRecord
from ..report.format import (
    admin_order_url, format_datetime, format_money, item_sku, print_heading, print_rule, print_section,
    print_table,
)
from ..store.order_store import OrderStore
from ..utils.validation import validate_email, validate_limit


class ByEmailArgs(NamedTuple):
    """Arguments for the by-email operation."""
    email: str
    limit: int | None  # None lists every order
    status: str | None  # None or 'any' disables the status filter
    admin_url: str


def do_by_email(store: OrderStore, args: ByEmailArgs) -> list[OrderRecord]:
    """Print the most recent orders of a customer with their items.

    Returns:
        The listed orders, newest first; empty when the customer has none

    Raises:
        InvalidInput: If the email or limit is invalid
    """
    email = validate_email(args.email)
    limit = validate_limit(args.limit)

    orders = store.find_by_email(email, status=args.status, limit=limit)
    if not orders:
        print(f"Warning: No orders found for email: {email}")
        return orders

    print()
    print_heading(f"Orders for {email}")
    print(f"Found {len(orders)} order(s)")
    print()

    for order in orders:
        print_rule()
        print(f"Order #{order.order_id}")
        print_rule()

        print(f"Status: {order.status}")
        print(f"Date: {format_datetime(order.created_at)}")
        print(f"Customer: {order.customer_name}")
        print(f"Total: {format_money(order.total, order.currency)}")
        print(f"Admin URL: {admin_order_url(args.admin_url, order.order_id)}")

        print()
        print_section("Order Items")

        if not order.items:
            print("No items in this order.")
        else:
            print_table(
                [('Product', False), ('SKU', False), ('Qty', True), ('Total', True)],
                [
                    {
                        'Product': item.name,
                        'SKU': item_sku(item),
                        'Qty': item.quantity,
                        'Total': format_money(item.total, order.currency),
                    }
                    for item in order.items
                ]
            )

        print()

    print("Orders listed successfully.")
    return orders
