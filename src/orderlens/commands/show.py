"""Show subcommand for displaying one order in detail."""

from typing import NamedTuple

from ..orders.record import OrderRecord
from ..report.format import (
    admin_order_url, format_datetime, format_money, html_to_text, item_sku, print_heading, print_section,
    print_table,
)
from ..store.order_store import OrderNotFound, OrderStore


class ShowArgs(NamedTuple):
    """Arguments for the show operation."""
    order_id: str
    admin_url: str  # Admin base URL used to build order links


def do_show(store: OrderStore, args: ShowArgs) -> OrderRecord:
    """Print the details of an order: header fields, addresses, items and totals.

    Raises:
        OrderNotFound: If the store has no order with the given ID
    """
    order = store.get_order(args.order_id)
    if order is None:
        raise OrderNotFound(f"Order #{args.order_id} not found.")

    print()
    print_heading(f"Order #{order.order_id}")
    print()

    fields = [
        ('Status', order.status),
        ('Date Created', format_datetime(order.created_at)),
        ('Customer', order.customer_name),
        ('Email', order.customer_email),
        ('Phone', order.phone),
        ('Payment Method', order.payment_method),
        ('Total', format_money(order.total, order.currency)),
        ('Admin URL', admin_order_url(args.admin_url, order.order_id)),
    ]
    for label, value in fields:
        print(f"{label}: {value}")

    print()
    print_section("Billing Address")
    print(html_to_text(order.billing_address))

    if order.shipping_address:
        print()
        print_section("Shipping Address")
        print(html_to_text(order.shipping_address))

    print()
    print_section("Order Items")
    print()

    if not order.items:
        print("No items in this order.")
    else:
        print_table(
            [('ID', True), ('Product', False), ('SKU', False), ('Qty', True), ('Subtotal', True), ('Total', True)],
            [
                {
                    'ID': item.item_id if item.item_id is not None else '',
                    'Product': item.name,
                    'SKU': item_sku(item),
                    'Qty': item.quantity,
                    'Subtotal': format_money(item.subtotal, order.currency),
                    'Total': format_money(item.total, order.currency),
                }
                for item in order.items
            ]
        )

    print()
    print_section("Order Totals")
    print(f"Subtotal: {format_money(order.subtotal, order.currency)}")
    print(f"Shipping: {format_money(order.shipping_total, order.currency)}")
    print(f"Tax: {format_money(order.tax_total, order.currency)}")
    print(f"Discount: {format_money(order.discount_total, order.currency)}")
    print(f"Total: {format_money(order.total, order.currency)}")
    print()

    print(f"Order #{order.order_id} displayed successfully.")
    return order
