"""
mibgen - Go model generation for MIB modules.

Loads compiled MIB modules and writes gosmi model declarations for their
scalars, tables, rows, columns and notifications.
"""

__version__ = "0.1.0"
