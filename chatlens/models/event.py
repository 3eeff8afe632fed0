"""
chatlens/models/event.py
Incoming accessibility event. Data only, plus the mapping to and from
Android's AccessibilityEvent type constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from chatlens.tree.node import NodeHandle


class EventKind(Enum):
    VIEW_CLICKED           = 0x00000001
    VIEW_FOCUSED           = 0x00000008
    VIEW_SELECTED          = 0x00000004
    VIEW_TEXT_CHANGED      = 0x00000010
    WINDOW_STATE_CHANGED   = 0x00000020
    WINDOW_CONTENT_CHANGED = 0x00000800
    VIEW_SCROLLED          = 0x00001000
    UNKNOWN                = -1

    @classmethod
    def parse(cls, value: Union[int, str, 'EventKind', None]) -> 'EventKind':
        """
        Accept an EventKind, an Android type constant, or a name such as
        'WINDOW_STATE_CHANGED' / 'TYPE_WINDOW_STATE_CHANGED'.
        Anything unrecognised maps to UNKNOWN.
        """
        if isinstance(value, EventKind):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return cls.UNKNOWN
        if isinstance(value, str):
            name = value.strip().upper()
            if name.startswith('TYPE_'):
                name = name[len('TYPE_'):]
            return cls.__members__.get(name, cls.UNKNOWN)
        return cls.UNKNOWN


@dataclass
class Event:
    """One accessibility event delivered by the host."""
    package_name:        str
    kind:                EventKind
    time_ms:             Optional[int]          = None
    class_name:          Optional[str]          = None
    content_description: Optional[str]          = None
    root_node:           Optional["NodeHandle"] = None   # lent by the host, never released here
