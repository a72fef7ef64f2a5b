"""Order model.

This package contains:
- record: LineItem and OrderRecord snapshots with msgpack and JSON export conversion
"""
