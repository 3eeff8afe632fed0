"""
chatlens/classifiers/node_classifier.py
Ordered rule table deciding what one list entry is.

Each rule looks at the entry's own class/text/description and either
returns a Classification (record or skip) or None to pass the entry on.
The first rule that answers wins. MESSAGE_RULES ends with the composite
bubble fallback; CALL_RULES is the rule set for rows of the Calls tab.

Extend by building a NodeClassifier with a different rule list.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from chatlens import patterns, widgets
from chatlens.classifiers.bubble_parser import (
    SKIP,
    Classification,
    parse_bubble,
    parse_call_item,
)
from chatlens.models.record import (
    ConversationContext,
    MessageRecord,
    SystemEventRecord,
    UnreadMarker,
)
from chatlens.tree.node import NodeHandle, stripped

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeView:
    """The entry's own attributes, read once per classification."""
    class_name:          str
    text:                Optional[str]
    content_description: Optional[str]

    @classmethod
    def read(cls, node: NodeHandle) -> "NodeView":
        return cls(
            class_name          = node.class_name or '',
            text                = stripped(node.text),
            content_description = stripped(node.content_description),
        )


RuleFn = Callable[[NodeView, NodeHandle, ConversationContext], Optional[Classification]]


@dataclass(frozen=True)
class ClassifierRule:
    name:  str
    apply: RuleFn


# ── MESSAGE RULES (in precedence order) ──────────────────────

def _day_or_encryption_notice(view, node, ctx):
    if view.class_name != widgets.TEXT_VIEW or view.text is None:
        return None
    if view.text in widgets.DAY_SEPARATORS or widgets.ENCRYPTION_NOTICE in view.text:
        return SKIP
    return None


def _unread_marker(view, node, ctx):
    if view.class_name == widgets.TEXT_VIEW and view.text and widgets.UNREAD_NOTICE in view.text:
        return Classification(record=UnreadMarker(
            count    = patterns.extract_count(view.text),
            chat_id  = ctx.chat_id,
            is_group = ctx.is_group,
        ))
    return None


def _time_separator(view, node, ctx):
    if view.class_name == widgets.TEXT_VIEW and view.text and patterns.is_time(view.text):
        return SKIP
    return None


def _bare_text(view, node, ctx):
    if view.class_name != widgets.TEXT_VIEW:
        return None
    if not view.text:
        return SKIP
    return Classification(record=MessageRecord(
        text        = view.text,
        is_outgoing = False,
        chat_id     = ctx.chat_id,
        is_group    = ctx.is_group,
    ))


def _system_notice(view, node, ctx):
    if view.class_name not in (widgets.BUTTON, widgets.VIEW_GROUP) or not view.text:
        return None
    if any(s in view.text for s in widgets.SYSTEM_NOTICES):
        return Classification(record=SystemEventRecord(
            text     = view.text,
            kind     = 'system_message' if ctx.is_group else 'call_info',
            chat_id  = ctx.chat_id,
            is_group = ctx.is_group,
        ))
    return None


def _status_icon(view, node, ctx):
    if (view.class_name == widgets.IMAGE_VIEW
            and view.content_description in widgets.DELIVERY_STATUSES):
        return SKIP
    return None


def _composite_bubble(view, node, ctx):
    return parse_bubble(node, ctx)


MESSAGE_RULES: List[ClassifierRule] = [
    ClassifierRule('day_or_encryption_notice', _day_or_encryption_notice),
    ClassifierRule('unread_marker',            _unread_marker),
    ClassifierRule('time_separator',           _time_separator),
    ClassifierRule('bare_text',                _bare_text),
    ClassifierRule('system_notice',            _system_notice),
    ClassifierRule('status_icon',              _status_icon),
    ClassifierRule('composite_bubble',         _composite_bubble),
]

# ── CALL RULES ───────────────────────────────────────────────

def _call_item(view, node, ctx):
    return parse_call_item(node)


CALL_RULES: List[ClassifierRule] = [
    ClassifierRule('call_item', _call_item),
]


class NodeClassifier:
    """Runs a rule table over one entry. Read-only with respect to ctx."""

    def __init__(self, rules: Sequence[ClassifierRule] = MESSAGE_RULES):
        self.rules = list(rules)

    def classify(self, node: NodeHandle, ctx: ConversationContext) -> Classification:
        """
        Raises NodeUnavailable if the entry itself cannot be read; callers
        treat that as a skip.
        """
        view = NodeView.read(node)
        for rule in self.rules:
            result = rule.apply(view, node, ctx)
            if result is not None:
                logger.debug(f"{rule.name}: {view.class_name}")
                return result
        return SKIP
