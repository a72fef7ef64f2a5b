"""Local order store.

This package contains:
- order_store: OrderStore, the LevelDB snapshot that serves orders to the reports
- settings: StoreSettings for reading .orderlens/settings.toml
- path: Utilities for locating the .orderlens directory
"""
