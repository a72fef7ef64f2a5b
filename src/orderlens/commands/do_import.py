"""Import subcommand for loading an order export into the local store."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, NamedTuple

from ..orders.record import OrderRecord
from ..store.order_store import OrderStore
from ..utils.validation import InvalidInput

logger = logging.getLogger(__name__)


class ImportArgs(NamedTuple):
    """Arguments for the import operation."""
    source: Path  # JSON file: a list of orders or an object with an "orders" list
    replace: bool  # Drop existing orders before importing


def load_export(source: Path) -> list[OrderRecord]:
    """Parse an order export file.

    Raises:
        InvalidInput: If the file cannot be read or an order entry is malformed
    """
    try:
        with open(source, 'r', encoding='utf-8') as f:
            data: Any = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidInput(f"Cannot read orders from {source}: {e}") from e

    if isinstance(data, dict):
        data = data.get('orders')
    if not isinstance(data, list):
        raise InvalidInput(f"Expected a list of orders in {source}")

    records = []
    for index, entry in enumerate(data):
        try:
            records.append(OrderRecord.from_dict(entry))
        except KeyError as e:
            raise InvalidInput(f"Order entry {index} in {source} is missing {e}") from e
        except (ValueError, TypeError, ArithmeticError, AttributeError) as e:
            raise InvalidInput(f"Order entry {index} in {source} is malformed: {e}") from e

    return records


def do_import(store: OrderStore, args: ImportArgs) -> int:
    """Load orders from an export file into the store.

    Orders already in the store are replaced when an imported order has the same ID.

    Returns:
        Number of imported orders
    """
    records = load_export(args.source)

    if args.replace:
        store.truncate()

    count = store.write_orders(records)
    store.ensure_store_id()
    store.write_manifest(OrderStore.MANIFEST_IMPORTED_AT, datetime.now(timezone.utc).isoformat())

    logger.info("Imported %d orders from %s", count, args.source)
    print(f"Imported {count} order(s) from {args.source}")
    return count
