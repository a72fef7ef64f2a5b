import argparse
import logging
import os
import sys
import textwrap
from functools import wraps
from pathlib import Path

from . import Workspace, StoreNotFound, OrderNotFound, InvalidInput
from .store.path import find_store_for_path


def needs_workspace(func):
    """Decorator for commands that run against a workspace.

    The decorated function receives (workspace, args). The wrapper takes (load_workspace_fn, args), opens
    the workspace with load_workspace_fn and closes it when the command returns.
    """
    @wraps(func)
    def wrapper(load_workspace_fn, args):
        with load_workspace_fn() as workspace:
            return func(workspace, args)
    return wrapper


def orderlens_main(argv=None):
    parser = argparse.ArgumentParser(
        prog='orderlens',
        description='Print reports on an e-commerce order store: order details, orders of a customer, and '
                    'duplicate orders per customer or across a date range.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              orderlens import orders.json
              orderlens show 123
              orderlens scan-duplicates --start 2024-01-01
            ''').strip()
    )
    parser.add_argument(
        '--store',
        metavar='PATH',
        help='Directory holding the .orderlens store. If not provided, uses ORDERLENS_STORE environment variable '
             'or searches from current directory upward.')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log debug information to standard error (ignored when --log-file is given)')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file for operation logging. If not provided, uses logging.path from store settings or no '
             'logging.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO when --log-file is provided.')
    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        title='Commands',
        description='Available report commands',
        help='Use "orderlens COMMAND --help" for command-specific help'
    )

    parser_show = subparsers.add_parser(
        'show',
        help='Display order details with all order items',
        description='Displays the status, customer, addresses, items and totals of one order.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              orderlens show 123
            ''').strip())
    parser_show.add_argument(
        'order_id',
        metavar='ORDER_ID',
        help='The order ID to display')
    parser_show.set_defaults(method=_show, create=False)

    parser_by_email = subparsers.add_parser(
        'by-email',
        help='List the orders of a customer by email address',
        description='Lists the most recent orders placed with a billing email address, newest first.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              orderlens by-email customer@example.com
              orderlens by-email customer@example.com --status completed
              orderlens by-email customer@example.com --limit 5
            ''').strip())
    parser_by_email.add_argument(
        'email',
        metavar='EMAIL',
        help='The customer email address')
    parser_by_email.add_argument(
        '--limit',
        type=int,
        metavar='N',
        help='Maximum number of orders to display (default: display.limit from settings, or 10)')
    parser_by_email.add_argument(
        '--status',
        metavar='STATUS',
        help='Filter by order status (e.g., completed, processing, pending)')
    parser_by_email.set_defaults(method=_by_email, create=False)

    parser_find = subparsers.add_parser(
        'find-duplicates',
        help='Find duplicate orders (same items) of a customer',
        description='Finds sets of orders of one customer that contain exactly the same products. Items whose '
                    'product no longer exists are ignored in the comparison.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              orderlens find-duplicates customer@example.com
              orderlens find-duplicates customer@example.com --match-quantity
              orderlens find-duplicates customer@example.com --status completed
            ''').strip())
    parser_find.add_argument(
        'email',
        metavar='EMAIL',
        help='The customer email address')
    parser_find.add_argument(
        '--status',
        metavar='STATUS',
        help='Filter by order status (e.g., completed, processing, pending)')
    parser_find.add_argument(
        '--match-quantity',
        action='store_true',
        help='Require exact quantity matches (default: only match products)')
    parser_find.set_defaults(method=_find_duplicates, create=False)

    parser_scan = subparsers.add_parser(
        'scan-duplicates',
        help='Scan all orders in a date range for duplicates, grouped by customer email',
        description='Scans every order created in a date range and reports, per customer email, the sets of '
                    'orders with identical items. Refunds and orders without an email are skipped.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              orderlens scan-duplicates --start 2024-01-01 --end 2024-01-31
              orderlens scan-duplicates --start 2024-11-01 --status completed
              orderlens scan-duplicates --start 2024-01-01 --match-quantity
            ''').strip())
    parser_scan.add_argument(
        '--start',
        metavar='DATE',
        help='Start date for the scan (YYYY-MM-DD, required)')
    parser_scan.add_argument(
        '--end',
        metavar='DATE',
        help='End date for the scan (YYYY-MM-DD, default: today)')
    parser_scan.add_argument(
        '--status',
        metavar='STATUS',
        help='Filter by order status (e.g., completed, processing, pending)')
    parser_scan.add_argument(
        '--match-quantity',
        action='store_true',
        help='Require exact quantity matches (default: only match products)')
    parser_scan.set_defaults(method=_scan_duplicates, create=False)

    parser_import = subparsers.add_parser(
        'import',
        help='Import an order export into the store',
        description='Loads orders from a JSON export (a list of orders, or an object with an "orders" list) into '
                    'the store, creating the store in the current directory if none is found. Orders with an ID '
                    'already in the store replace the stored ones.')
    parser_import.add_argument(
        'source',
        metavar='FILE',
        help='JSON file to import')
    parser_import.add_argument(
        '--replace',
        action='store_true',
        help='Remove all stored orders before importing')
    parser_import.set_defaults(method=_import_orders, create=True)

    parser_inspect = subparsers.add_parser(
        'inspect',
        help='Inspect and display store records',
        description='Displays the manifest properties, orders and index entries stored in the order store.')
    parser_inspect.set_defaults(method=_inspect, create=False)

    args = parser.parse_args(argv)

    if args.log_file:
        log_level = args.log_level if args.log_level is not None else 'INFO'

        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    elif args.verbose:
        logging.basicConfig(
            stream=sys.stderr,
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    store_path = args.store
    if store_path is None:
        store_path = os.environ.get('ORDERLENS_STORE')

    def load_workspace():
        if store_path is not None:
            workspace = Workspace(store_path, create=args.create)
        else:
            working_directory = Path.cwd()
            found = find_store_for_path(working_directory)
            if found is not None:
                workspace = Workspace(found)
            elif args.create:
                workspace = Workspace(working_directory, create=True)
            else:
                raise StoreNotFound(f"No order store found in {working_directory} or any parent directory. "
                                    f"Run 'orderlens import FILE' to create one.")

        if not args.log_file:
            workspace.configure_logging_from_settings()
        return workspace

    try:
        args.method(load_workspace, args)
    except (StoreNotFound, OrderNotFound, InvalidInput) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


@needs_workspace
def _show(workspace: Workspace, args):
    workspace.show(args.order_id)


@needs_workspace
def _by_email(workspace: Workspace, args):
    workspace.list_by_email(args.email, limit=args.limit, status=args.status)


@needs_workspace
def _find_duplicates(workspace: Workspace, args):
    workspace.find_duplicates(args.email, status=args.status, match_quantity=args.match_quantity)


@needs_workspace
def _scan_duplicates(workspace: Workspace, args):
    workspace.scan_duplicates(args.start, args.end, status=args.status, match_quantity=args.match_quantity)


@needs_workspace
def _import_orders(workspace: Workspace, args):
    workspace.import_orders(args.source, replace=args.replace)


@needs_workspace
def _inspect(workspace: Workspace, args):
    for record in workspace.inspect():
        print(record)


if __name__ == '__main__':
    orderlens_main()
