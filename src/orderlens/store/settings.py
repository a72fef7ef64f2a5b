from pathlib import Path

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib  # pyright: ignore[reportMissingImports]

from ..utils.validation import InvalidInput
from .path import get_store_directory_path


# Settings key constants
SETTING_LOGGING_PATH = 'logging.path'
SETTING_ADMIN_URL = 'admin.url'
SETTING_DISPLAY_LIMIT = 'display.limit'

DEFAULT_ADMIN_URL = 'http://localhost/wp-admin/'
DEFAULT_DISPLAY_LIMIT = 10


class StoreSettings:
    """Read-only access to .orderlens/settings.toml.

    A missing settings file behaves like an empty one: every get() returns its default.

    Example:
        settings = StoreSettings(store_root)
        admin_url = settings.get(SETTING_ADMIN_URL, DEFAULT_ADMIN_URL)
    """

    def __init__(self, store_root: Path):
        self._store_root = store_root
        self._settings = {}

        settings_file = get_store_directory_path(store_root) / 'settings.toml'
        if settings_file.exists():
            with open(settings_file, 'rb') as f:
                self._settings = tomllib.load(f)

    def get(self, key: str, default=None):
        """Get a setting by dotted key path ('admin.url' reads settings['admin']['url']).

        Returns default if the path does not exist or crosses a non-table value.
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def admin_url(self) -> str:
        return str(self.get(SETTING_ADMIN_URL, DEFAULT_ADMIN_URL))

    @property
    def display_limit(self) -> int:
        value = self.get(SETTING_DISPLAY_LIMIT, DEFAULT_DISPLAY_LIMIT)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidInput(f"Setting {SETTING_DISPLAY_LIMIT} must be an integer, got {value!r}") from None
