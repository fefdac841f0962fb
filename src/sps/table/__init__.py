"""
Table storage and text codec.
"""

from sps.table.codec import encode_cell, load, save
from sps.table.store import Table

__all__ = ["Table", "load", "save", "encode_cell"]
