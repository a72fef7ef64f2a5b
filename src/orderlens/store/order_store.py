import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
from typing import Iterable, Iterator

import mmh3
import plyvel

from ..orders.record import OrderId, OrderRecord
from .path import get_store_directory_path

logger = logging.getLogger(__name__)

_EPOCH_BIAS = 1 << 63


class StoreNotFound(FileNotFoundError):
    pass


class OrderNotFound(LookupError):
    pass


def normalize_status(status: str | None) -> str | None:
    """Normalize an order status for comparison; None means no filter.

    'any' disables filtering and a leading 'wc-' is dropped, so 'wc-completed' and 'completed' match.
    """
    if status is None:
        return None

    status = status.strip().lower()
    if status in ('', 'any'):
        return None

    if status.startswith('wc-'):
        status = status[3:]

    return status


def _epoch_seconds(moment: datetime) -> int:
    # Naive timestamps are taken as UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


class OrderStore:
    """LevelDB snapshot of an order repository.

    The store serves orders to the reports the way the live order repository would: one order by ID,
    a customer's orders by email, or all orders created within a date range. Queries never fail for a
    lack of matches; they return empty results.

    Layout of the database, by key prefix:
    - 'p': manifest properties (store ID, import time)
    - 'o': msgpack-encoded OrderRecord keyed by order ID
    - 'e': email index, <16-byte Murmur3 hash of the lower-cased email><order ID> -> empty
    - 'd': creation date index, <8-byte big-endian biased epoch seconds><order ID> -> empty

    Index keys end with the order ID so that entries never collide; hash collisions between emails
    are resolved by checking the stored record.
    """
    __MANIFEST_PROPERTY_PREFIX = b'p'
    __ORDER_PREFIX = b'o'
    __EMAIL_INDEX_PREFIX = b'e'
    __DATE_INDEX_PREFIX = b'd'

    MANIFEST_STORE_ID = 'store-id'
    MANIFEST_IMPORTED_AT = 'imported-at'

    def __init__(self, store_root: Path, create: bool = False):
        """Open the order database at store_root/.orderlens/database.

        Args:
            store_root: Directory holding the .orderlens directory
            create: Create .orderlens if missing

        Raises:
            FileNotFoundError: Store root does not exist
            NotADirectoryError: Store root or its .orderlens entry is not a directory
            StoreNotFound: .orderlens is missing and create=False
        """
        if not store_root.exists():
            raise FileNotFoundError(f"Store {store_root} does not exist")

        if not store_root.is_dir():
            raise NotADirectoryError(f"Store {store_root} is not a directory")

        store_dir = get_store_directory_path(store_root)

        if create:
            store_dir.mkdir(exist_ok=True)

        if not store_dir.exists():
            raise StoreNotFound(f"No order store has been created in {store_root}")

        if not store_dir.is_dir():
            raise NotADirectoryError(f"The order store in {store_root} is not a directory")

        database = plyvel.DB(str(store_dir / 'database'), create_if_missing=True)
        try:
            self._manifest_database = database.prefixed_db(OrderStore.__MANIFEST_PROPERTY_PREFIX)
            self._order_database = database.prefixed_db(OrderStore.__ORDER_PREFIX)
            self._email_index = database.prefixed_db(OrderStore.__EMAIL_INDEX_PREFIX)
            self._date_index = database.prefixed_db(OrderStore.__DATE_INDEX_PREFIX)
        except Exception:
            database.close()
            raise

        self._store_root = store_root
        self._database = database
        self._alive = True
        logger.debug("Opened order store at %s", store_dir)

    def __del__(self):
        self.close()

    def __enter__(self):
        if not self._alive:
            raise BrokenPipeError("Order store was closed")

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the LevelDB database; further use of the store is an error."""
        if not getattr(self, '_alive', False):
            return

        self._alive = False
        self._database.close()
        self._database = None

    @property
    def store_root(self) -> Path:
        return self._store_root

    def write_manifest(self, entry: str, value: str | None) -> None:
        """Write or delete manifest property. None value deletes the key."""
        if value is None:
            self._manifest_database.delete(entry.encode())
        else:
            self._manifest_database.put(entry.encode(), value.encode())

    def read_manifest(self, entry: str) -> str | None:
        value = self._manifest_database.get(entry.encode())

        if value is not None:
            value = value.decode()

        return value

    def ensure_store_id(self) -> str:
        """Return the store ID, generating one on first use."""
        store_id = self.read_manifest(OrderStore.MANIFEST_STORE_ID)
        if store_id is None:
            store_id = str(uuid.uuid4())
            self.write_manifest(OrderStore.MANIFEST_STORE_ID, store_id)
        return store_id

    def truncate(self) -> None:
        """Remove all orders and index entries. Manifest properties are kept."""
        for database in (self._order_database, self._email_index, self._date_index):
            batch = database.write_batch()
            for key in database.iterator(include_value=False):
                batch.delete(key)
            batch.write()

    def write_order(self, record: OrderRecord) -> None:
        """Insert or replace an order together with its index entries."""
        self.write_orders([record])

    def write_orders(self, records: Iterable[OrderRecord]) -> int:
        """Insert or replace orders in a single batch.

        Returns:
            Number of orders written
        """
        count = 0
        with self._database.write_batch() as batch:
            pending: dict[bytes, OrderRecord] = {}
            for record in records:
                order_key = self._order_key(record.order_id)

                previous = pending.get(order_key)
                if previous is None:
                    previous = self._read_order(order_key)
                if previous is not None:
                    batch.delete(self._email_index_key(previous.customer_email, order_key))
                    batch.delete(self._date_index_key(previous.created_at, order_key))

                batch.put(OrderStore.__ORDER_PREFIX + order_key, record.to_msgpack())
                if record.customer_email:
                    batch.put(self._email_index_key(record.customer_email, order_key), b'')
                batch.put(self._date_index_key(record.created_at, order_key), b'')

                pending[order_key] = record
                count += 1

        return count

    def get_order(self, order_id: OrderId) -> OrderRecord | None:
        """Look up a single order by ID, returning None if the store has no such order."""
        return self._read_order(self._order_key(order_id))

    def find_by_email(self, email: str, status: str | None = None, limit: int | None = None) -> list[OrderRecord]:
        """Find the orders of a customer, newest first.

        Args:
            email: Customer billing email, compared case-insensitively
            status: Status filter, None or 'any' for all statuses
            limit: Maximum number of orders to return, None for all

        Returns:
            Matching orders sorted by creation time, most recent first
        """
        wanted_email = email.strip().lower()
        wanted_status = normalize_status(status)

        orders = []
        email_db = self._email_index.prefixed_db(self._compute_email_hash(wanted_email))
        for order_key in email_db.iterator(include_value=False):
            record = self._read_order(order_key)
            if record is None or record.customer_email.strip().lower() != wanted_email:
                continue
            if wanted_status is not None and normalize_status(record.status) != wanted_status:
                continue
            orders.append(record)

        orders.sort(key=lambda record: _epoch_seconds(record.created_at), reverse=True)
        if limit is not None:
            orders = orders[:limit]

        logger.debug("Found %d orders for %s", len(orders), email)
        return orders

    def find_in_range(self, start: date, end: date, status: str | None = None) -> list[OrderRecord]:
        """Find all orders, refunds included, created between start and end, newest first.

        Both days are included in full; day boundaries are taken in UTC.
        """
        wanted_status = normalize_status(status)
        start_key = self._encode_epoch(_epoch_seconds(datetime.combine(start, time.min)))
        stop_key = self._encode_epoch(_epoch_seconds(datetime.combine(end + timedelta(days=1), time.min)))

        orders = []
        for key in self._date_index.iterator(start=start_key, stop=stop_key, reverse=True, include_value=False):
            record = self._read_order(key[8:])
            if record is None:
                continue
            if wanted_status is not None and normalize_status(record.status) != wanted_status:
                continue
            orders.append(record)

        logger.debug("Found %d orders between %s and %s", len(orders), start, end)
        return orders

    def list_orders(self) -> Iterator[OrderRecord]:
        """Iterate over all stored orders in key order."""
        for _, value in self._order_database.iterator():
            yield OrderRecord.from_msgpack(value)

    def inspect(self) -> Iterator[str]:
        """Generate human-readable entries of the database for debugging."""
        for key, value in self._manifest_database.iterator():
            yield f"manifest-property {key.decode()} {value.decode()}"

        for record in self.list_orders():
            yield (f"order {record.order_id} type={record.order_type} status={record.status} "
                   f"email={record.customer_email} created={record.created_at.isoformat()} "
                   f"items={len(record.items)}")

        for key in self._email_index.iterator(include_value=False):
            yield f"email-index {key[:16].hex()} {key[16:].decode()}"

        for key in self._date_index.iterator(include_value=False):
            seconds = int.from_bytes(key[:8], byteorder='big') - _EPOCH_BIAS
            moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
            yield f"date-index {moment.isoformat()} {key[8:].decode()}"

    def _read_order(self, order_key: bytes) -> OrderRecord | None:
        data = self._order_database.get(order_key)
        if data is None:
            return None
        return OrderRecord.from_msgpack(data)

    @staticmethod
    def _order_key(order_id: OrderId) -> bytes:
        return str(order_id).encode('utf-8')

    @staticmethod
    def _email_index_key(email: str, order_key: bytes) -> bytes:
        return (OrderStore.__EMAIL_INDEX_PREFIX + OrderStore._compute_email_hash(email.strip().lower())
                + order_key)

    @staticmethod
    def _date_index_key(created_at: datetime, order_key: bytes) -> bytes:
        return OrderStore.__DATE_INDEX_PREFIX + OrderStore._encode_epoch(_epoch_seconds(created_at)) + order_key

    @staticmethod
    def _encode_epoch(seconds: int) -> bytes:
        return (seconds + _EPOCH_BIAS).to_bytes(8, byteorder='big')

    @staticmethod
    def _compute_email_hash(email: str) -> bytes:
        """Compute the 128-bit Murmur3 hash of a normalized email as 16 bytes."""
        hash_value = mmh3.hash128(email.encode('utf-8'), signed=False)
        return hash_value.to_bytes(16, byteorder='big')
