import logging
import os
from pathlib import Path
from typing import Iterator

from .commands.by_email import ByEmailArgs, do_by_email
from .commands.do_import import ImportArgs, do_import
from .commands.find_duplicates import FindDuplicatesArgs, do_find_duplicates
from .commands.scan_duplicates import ScanDuplicatesArgs, do_scan_duplicates
from .commands.show import ShowArgs, do_show
from .duplicates.grouper import DuplicateGroup
from .duplicates.scan import ScanResult
from .orders.record import OrderRecord
from .store.order_store import OrderStore
from .store.settings import StoreSettings, SETTING_LOGGING_PATH


class Workspace:
    """Workflow layer of the reporting tool.

    A workspace is a directory holding a .orderlens directory with the order store database and an
    optional settings.toml. Workspace opens the store, applies settings (admin URL, default list size,
    log file) and runs the report operations against it. OrderStore, by contrast, only answers order
    queries.
    """

    def __init__(self, path: str | os.PathLike, create: bool = False):
        """Open the workspace at path.

        Args:
            path: Directory holding .orderlens
            create: Create .orderlens if missing

        Raises:
            FileNotFoundError: Directory does not exist
            NotADirectoryError: Path is not a directory
            StoreNotFound: .orderlens missing and create=False
        """
        workspace_path = Path(path)

        settings = StoreSettings(workspace_path)

        self._store = OrderStore(workspace_path, create)
        self._settings = settings

    def __del__(self):
        self.close()

    def __enter__(self):
        self._store.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._store.__exit__(exc_type, exc_val, exc_tb)

    def close(self):
        if hasattr(self, '_store'):
            self._store.close()

    @property
    def store(self) -> OrderStore:
        return self._store

    @property
    def settings(self) -> StoreSettings:
        return self._settings

    def configure_logging_from_settings(self) -> bool:
        """Send logging to the file named by logging.path in the settings, if any.

        Keeps the current logging level if one was configured already.

        Returns:
            True if logging was configured, False otherwise
        """
        log_path_setting = self._settings.get(SETTING_LOGGING_PATH)
        if log_path_setting:
            current_level = logging.root.level if logging.root.level != logging.NOTSET else logging.INFO

            for handler in logging.root.handlers[:]:
                logging.root.removeHandler(handler)

            logging.basicConfig(
                filename=str(log_path_setting),
                level=current_level,
                format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            return True
        return False

    def show(self, order_id: str) -> OrderRecord:
        """Print one order in detail.

        Raises:
            OrderNotFound: If the order does not exist
        """
        return do_show(self._store, ShowArgs(order_id, self._settings.admin_url))

    def list_by_email(self, email: str, limit: int | None = None, status: str | None = None) -> list[OrderRecord]:
        """Print the latest orders of a customer. limit defaults to display.limit from the settings."""
        if limit is None:
            limit = self._settings.display_limit
        return do_by_email(self._store, ByEmailArgs(email, limit, status, self._settings.admin_url))

    def find_duplicates(self, email: str, status: str | None = None,
                        match_quantity: bool = False) -> list[DuplicateGroup]:
        """Print sets of identical orders placed by one customer."""
        return do_find_duplicates(
            self._store,
            FindDuplicatesArgs(email, status, match_quantity, self._settings.admin_url)
        )

    def scan_duplicates(self, start: str | None, end: str | None = None, status: str | None = None,
                        match_quantity: bool = False) -> ScanResult:
        """Print sets of identical orders per customer for all orders created from start to end."""
        return do_scan_duplicates(
            self._store,
            ScanDuplicatesArgs(start, end, status, match_quantity, self._settings.admin_url)
        )

    def import_orders(self, source: str | os.PathLike, replace: bool = False) -> int:
        """Load a JSON order export into the store, returning the number of orders imported."""
        return do_import(self._store, ImportArgs(Path(source), replace))

    def inspect(self) -> Iterator[str]:
        yield from self._store.inspect()
