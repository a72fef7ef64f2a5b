"""Plain-text formatting helpers shared by the report commands."""

import html
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence

from ..orders.record import LineItem, OrderId, OrderRecord

RULE_WIDTH = 80

CURRENCY_SYMBOLS = {
    'USD': '$',
    'CAD': '$',
    'AUD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'INR': '₹',
}

_LINE_BREAK = re.compile(r'<br\s*/?>', re.IGNORECASE)
_TAG = re.compile(r'<[^>]+>')


def format_money(amount: Decimal, currency: str = '') -> str:
    """Format an amount with two decimals, e.g. "$1,234.50" or "1,234.50 CHF"."""
    text = f"{amount:,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is not None:
        if text.startswith('-'):
            return f"-{symbol}{text[1:]}"
        return f"{symbol}{text}"
    if currency:
        return f"{text} {currency}"
    return text


def format_datetime(moment: datetime) -> str:
    return moment.strftime('%Y-%m-%d %H:%M:%S')


def html_to_text(value: str) -> str:
    """Turn an HTML fragment such as a formatted address into plain text with newlines for <br>."""
    value = _LINE_BREAK.sub('\n', value)
    value = _TAG.sub('', value)
    return html.unescape(value).strip()


def admin_order_url(admin_url: str, order_id: OrderId) -> str:
    """Build the admin edit URL of an order from the admin base URL."""
    if not admin_url.endswith('/'):
        admin_url += '/'
    return f"{admin_url}post.php?post={order_id}&action=edit"


def print_heading(title: str) -> None:
    print(f"=== {title} ===")


def print_section(title: str) -> None:
    print(f"--- {title} ---")


def print_rule(char: str = '=') -> None:
    print(char * RULE_WIDTH)


def print_table(columns: Sequence[tuple[str, bool]], rows: Iterable[dict[str, Any]]) -> None:
    """Print rows as a fixed-width table.

    Args:
        columns: (header, align_right) pairs; each row is looked up by header
        rows: Mappings from header to cell value
    """
    rows = list(rows)
    if not rows:
        return

    headers = [column[0] for column in columns]
    widths = [max(len(header), max(len(str(row[header])) for row in rows)) for header in headers]

    specs = []
    for (header, align_right), width in zip(columns, widths):
        specs.append(f"{{:{'>' if align_right else '<'}{width}}}")
    template = "  ".join(specs)

    header_line = template.format(*headers)
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print(template.format(*(str(row[header]) for header in headers)))


def item_sku(item: LineItem) -> str:
    return item.sku or 'N/A'


def print_items_table(items: Sequence[LineItem]) -> None:
    """Print the items of a duplicate set: product, SKU and quantity."""
    print_table(
        [('Product', False), ('SKU', False), ('Qty', True)],
        [{'Product': item.name, 'SKU': item_sku(item), 'Qty': item.quantity} for item in items]
    )


def print_orders_table(orders: Sequence[OrderRecord], admin_url: str) -> None:
    """Print one row per order with its ID, date, status, total and admin link."""
    print_table(
        [('Order ID', True), ('Date', False), ('Status', False), ('Total', True), ('Admin URL', False)],
        [
            {
                'Order ID': order.order_id,
                'Date': format_datetime(order.created_at),
                'Status': order.status,
                'Total': format_money(order.total, order.currency),
                'Admin URL': admin_order_url(admin_url, order.order_id),
            }
            for order in orders
        ]
    )
