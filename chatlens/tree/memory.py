"""
chatlens/tree/memory.py
In-memory NodeHandle implementation over plain dict / JSON trees.

Used by the replay CLI (captures are JSON) and by the tests. Every handle
is counted in a HandleLedger so a run can prove that acquires and releases
balance. Releasing twice or reading a released handle raises HandleError.

Node dict format (short or long keys accepted):

    {
      "class":    "android.widget.TextView",     # or "class_name"
      "text":     "Hello",
      "desc":     "Read",                        # or "content_description"
      "id":       "com.whatsapp:id/...",         # or "view_id"
      "stale":    false,                         # true: reads raise NodeUnavailable
      "children": [ {...}, null, ... ]           # null: child() returns None
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from chatlens.errors import HandleError, NodeUnavailable
from chatlens.tree.node import NodeHandle


@dataclass
class MemoryElement:
    """One element of an in-memory tree. Shared by every handle onto it."""
    class_name:          str
    text:                Optional[str]                     = None
    content_description: Optional[str]                     = None
    view_id:             Optional[str]                     = None
    children:            List[Optional["MemoryElement"]]   = field(default_factory=list)
    available:           bool                              = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemoryElement":
        children = [
            cls.from_dict(c) if c is not None else None
            for c in (data.get('children') or [])
        ]
        return cls(
            class_name          = data.get('class') or data.get('class_name') or '',
            text                = _get(data, 'text'),
            content_description = _get(data, 'desc', 'content_description'),
            view_id             = _get(data, 'id', 'view_id'),
            children            = children,
            available           = not data.get('stale', False),
        )


def _get(data: Dict[str, Any], *keys: str) -> Optional[str]:
    for k in keys:
        if data.get(k) is not None:
            return str(data[k])
    return None


class HandleLedger:
    """Counts handles created and released against one tree."""

    def __init__(self):
        self.acquired    = 0
        self.released    = 0
        self._open: Dict[int, "MemoryHandle"] = {}

    def open(self, handle: "MemoryHandle") -> None:
        self.acquired += 1
        self._open[id(handle)] = handle

    def close(self, handle: "MemoryHandle") -> None:
        if self._open.pop(id(handle), None) is None:
            raise HandleError(f"Handle released twice: {handle!r}")
        self.released += 1

    @property
    def outstanding(self) -> int:
        return len(self._open)

    @property
    def balanced(self) -> bool:
        return self.acquired == self.released and not self._open

    def __repr__(self) -> str:
        return f"HandleLedger(acquired={self.acquired}, released={self.released})"


class MemoryHandle(NodeHandle):

    def __init__(self, element: MemoryElement, ledger: HandleLedger):
        self._element  = element
        self._ledger   = ledger
        self._released = False
        ledger.open(self)

    def _live(self) -> MemoryElement:
        if self._released:
            raise HandleError(f"Handle used after release: {self!r}")
        if not self._element.available:
            raise NodeUnavailable(self._element.class_name)
        return self._element

    @property
    def class_name(self) -> str:
        return self._live().class_name

    @property
    def text(self) -> Optional[str]:
        return self._live().text

    @property
    def content_description(self) -> Optional[str]:
        return self._live().content_description

    @property
    def view_id(self) -> Optional[str]:
        return self._live().view_id

    @property
    def child_count(self) -> int:
        return len(self._live().children)

    def child(self, index: int) -> Optional["MemoryHandle"]:
        children = self._live().children
        if index < 0 or index >= len(children) or children[index] is None:
            return None
        return MemoryHandle(children[index], self._ledger)

    def duplicate(self) -> "MemoryHandle":
        return MemoryHandle(self._live(), self._ledger)

    def release(self) -> None:
        if self._released:
            raise HandleError(f"Handle released twice: {self!r}")
        self._released = True
        self._ledger.close(self)

    def __repr__(self) -> str:
        e = self._element
        return f"<MemoryHandle {e.class_name} text={e.text!r} desc={e.content_description!r}>"


def open_tree(data: Optional[Dict[str, Any]], ledger: Optional[HandleLedger] = None) -> Optional[MemoryHandle]:
    """Root handle onto a tree built from `data`. The caller releases it."""
    if data is None:
        return None
    return MemoryHandle(MemoryElement.from_dict(data), ledger or HandleLedger())
