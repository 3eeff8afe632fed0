"""
chatlens/classifiers/bubble_parser.py
Single-level parsing of composite nodes: a chat bubble (message mode) or a
row of the Calls tab (call mode).

Only the node's direct children are read. Each child handle is released
before moving to the next one, including when the child disappears
mid-read (that child is skipped).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from chatlens import patterns, widgets
from chatlens.errors import NodeUnavailable
from chatlens.models.record import (
    CallRecord,
    ConversationContext,
    MessageRecord,
    Record,
    SystemEventRecord,
)
from chatlens.tree.node import NodeHandle, acquired, stripped

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """
    Outcome for one node. record=None means skip.
    group_hint is set when group-only controls were seen inside the node.
    """
    record:     Optional[Record] = None
    group_hint: bool             = False


SKIP = Classification()


@dataclass(frozen=True)
class ChildView:
    """Attributes of one child, read once."""
    class_name:          str
    text:                Optional[str]
    content_description: Optional[str]

    @classmethod
    def read(cls, node: NodeHandle) -> "ChildView":
        return cls(
            class_name          = node.class_name or '',
            text                = stripped(node.text),
            content_description = stripped(node.content_description),
        )


def read_children(node: NodeHandle) -> List[ChildView]:
    """Direct children of `node`, in order. Unreachable children are left out."""
    views: List[ChildView] = []
    try:
        count = node.child_count
    except NodeUnavailable:
        return views

    for i in range(count):
        try:
            child = node.child(i)
        except NodeUnavailable:
            continue
        if child is None:
            continue
        with acquired(child):
            try:
                views.append(ChildView.read(child))
            except NodeUnavailable:
                logger.debug(f"Skipped unreachable child {i}")
    return views


# ── MESSAGE MODE ─────────────────────────────────────────────

@dataclass
class _Bubble:
    parts:           List[str]     = field(default_factory=list)
    timestamp:       Optional[str] = None
    sender:          Optional[str] = None
    delivery_status: Optional[str] = None
    is_outgoing:     bool          = False
    group_info:      Optional[str] = None
    group_hint:      bool          = False


def parse_bubble(node: NodeHandle, ctx: ConversationContext) -> Classification:
    bubble = _Bubble()
    for child in read_children(node):
        _absorb_message_child(bubble, child)

    is_group = ctx.is_group or bubble.group_hint
    text = ' '.join(bubble.parts).strip()

    if text:
        record = MessageRecord(
            text            = text,
            is_outgoing     = bubble.is_outgoing,
            timestamp       = bubble.timestamp,
            delivery_status = bubble.delivery_status,
            sender          = bubble.sender,
            chat_id         = ctx.chat_id,
            is_group        = is_group,
        )
    elif bubble.group_info:
        record = SystemEventRecord(
            text     = bubble.group_info,
            kind     = 'group_info',
            chat_id  = ctx.chat_id,
            is_group = is_group,
        )
    else:
        record = None
    return Classification(record=record, group_hint=bubble.group_hint)


def _absorb_message_child(bubble: _Bubble, child: ChildView) -> None:
    cls  = child.class_name
    text = child.text
    desc = child.content_description

    if cls == widgets.TEXT_VIEW and text is not None:
        if patterns.is_time(text):
            bubble.timestamp = text
        elif (text.startswith(widgets.SENDER_PREFIX)
                or text.startswith('+')
                or patterns.is_phone(text)
                or (desc is not None and widgets.SENDER_HINT in desc)):
            bubble.sender = text.replace(widgets.SENDER_PREFIX, '', 1).strip()
        elif any(s in text for s in widgets.GROUP_SUMMARY):
            bubble.group_info = text
        elif any(s in text for s in widgets.BUBBLE_BOILERPLATE):
            pass
        elif text:
            bubble.parts.append(text)

    elif cls == widgets.IMAGE_VIEW and desc is not None:
        if desc in widgets.DELIVERY_STATUSES:
            bubble.is_outgoing     = True
            bubble.delivery_status = desc

    elif cls == widgets.BUTTON and text is not None:
        if text in widgets.GROUP_BUTTONS:
            bubble.group_hint = True


# ── CALL MODE ────────────────────────────────────────────────

@dataclass
class _CallItem:
    name:         Optional[str] = None
    phone_number: Optional[str] = None
    direction:    Optional[str] = None
    timestamp:    Optional[str] = None


def parse_call_item(node: NodeHandle) -> Classification:
    item = _CallItem()
    for child in read_children(node):
        _absorb_call_child(item, child)

    if item.name or item.phone_number or item.direction or item.timestamp:
        return Classification(record=CallRecord(
            name         = item.name,
            phone_number = item.phone_number,
            direction    = item.direction,
            timestamp    = item.timestamp,
        ))
    return SKIP


def _absorb_call_child(item: _CallItem, child: ChildView) -> None:
    cls  = child.class_name
    text = child.text
    desc = child.content_description

    if cls == widgets.TEXT_VIEW and text:
        if patterns.is_phone(text):
            item.phone_number = text
        elif text.startswith(widgets.SENDER_PREFIX):
            item.name = text[len(widgets.SENDER_PREFIX):].strip()
        elif text in widgets.CALL_LIST_CHROME:
            pass
        elif patterns.contains_time(text) or any(d in text for d in widgets.DAY_SEPARATORS):
            item.timestamp = text
        elif item.name is None:
            item.name = text
        else:
            # Unrecognised second label: keep it raw rather than drop it.
            item.timestamp = item.timestamp or text

    elif cls == widgets.IMAGE_VIEW and desc:
        if any(d in desc for d in widgets.CALL_DIRECTIONS):
            item.direction = desc
        elif 'View' in desc and 'profile' in desc:
            # "View +91 93061 84110 profile"
            phone = patterns.find_phone(desc)
            if phone:
                item.phone_number = phone
