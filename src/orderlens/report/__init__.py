"""Report rendering.

This package contains:
- format: plain-text formatting of amounts, dates, addresses and tables shared by the commands
"""
