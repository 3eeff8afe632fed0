"""
chatlens/tree — node handle interface, scoped acquisition and search.
"""

from chatlens.tree.node import NodeHandle, acquired, released_all
from chatlens.tree.access import (
    find_all,
    find_by_exact_text,
    find_by_view_id,
    find_first,
)

__all__ = [
    "NodeHandle",
    "acquired",
    "released_all",
    "find_all",
    "find_by_exact_text",
    "find_by_view_id",
    "find_first",
]
