"""
chatlens/models/record.py
Shared dataclass schema. The classifier, batcher, dispatcher and
exporters all use these types. Do not add logic here — data only.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class ConversationContext:
    """Snapshot of the conversation the user is looking at."""
    chat_id:             Optional[str] = None
    is_group:            bool          = False
    is_call_list_active: bool          = False


@dataclass(frozen=True)
class MessageRecord:
    """One chat bubble or bare text line."""
    text:            str
    is_outgoing:     bool          = False
    timestamp:       Optional[str] = None     # time shown in the bubble, e.g. "3:15 pm"
    delivery_status: Optional[str] = None     # Delivered / Read / Sent
    sender:          Optional[str] = None
    chat_id:         Optional[str] = None
    is_group:        bool          = False
    record_type:     str           = field(default='message', init=False)


@dataclass(frozen=True)
class SystemEventRecord:
    """Group/system notice, call note, or group summary line."""
    text:        str
    kind:        str           = 'system_message'   # system_message / call_info / group_info
    chat_id:     Optional[str] = None
    is_group:    bool          = False
    record_type: str           = field(default='system_event', init=False)


@dataclass(frozen=True)
class UnreadMarker:
    """The "N unread messages" divider."""
    count:       Optional[int] = None
    chat_id:     Optional[str] = None
    is_group:    bool          = False
    record_type: str           = field(default='unread_marker', init=False)


@dataclass(frozen=True)
class CallRecord:
    """One row of the Calls tab."""
    name:         Optional[str] = None
    phone_number: Optional[str] = None
    direction:    Optional[str] = None    # icon description: Incoming / Outgoing / Missed ...
    timestamp:    Optional[str] = None    # as displayed, e.g. "Yesterday, 9:41 pm"
    record_type:  str           = field(default='call', init=False)


@dataclass(frozen=True)
class ActiveCallRecord:
    """An in-progress voice call advertised by the conversation toolbar."""
    contact:         Optional[str] = None
    direction:       Optional[str] = None   # Incoming / Outgoing
    raw_description: Optional[str] = None   # kept when the description does not parse
    record_type:     str           = field(default='active_call', init=False)


Record = Union[MessageRecord, SystemEventRecord, UnreadMarker, CallRecord]


@dataclass(frozen=True)
class Batch:
    """Records extracted from one qualifying event."""
    event_id:     int
    time_ms:      int
    date_str:     str
    batch_type:   str                              # chat / calls
    context:      ConversationContext
    records:      Tuple[Record, ...]               = ()
    active_calls: Tuple[ActiveCallRecord, ...]     = ()
