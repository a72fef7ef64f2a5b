"""Duplicate order detection.

This package contains:
- signature: canonical item signatures for orders
- grouper: grouping of orders sharing a signature within one scope
- scan: store-wide scan partitioned by customer email
"""
