"""
chatlens/state.py
Conversation state tracker.

Holds which chat is on screen, whether it is a group, and whether the
Calls tab is showing. Only two trigger events change it:

  1. Calls tab selected      → is_call_list_active = True (nothing else)
  2. Conversation opened     → chat_id / is_group re-derived from the
                               window, is_call_list_active = False

State persists until the next trigger; there is no idle timeout.
"""

import logging
from typing import List, Optional, Pattern

from chatlens import patterns, widgets
from chatlens.config import EngineSettings
from chatlens.errors import NodeUnavailable
from chatlens.models.event import Event, EventKind
from chatlens.models.record import ConversationContext
from chatlens.tree.access import find_all, find_by_exact_text, find_by_view_id
from chatlens.tree.node import NodeHandle, acquired, released_all, stripped

logger = logging.getLogger(__name__)

CALLS_TAB_KINDS = (EventKind.VIEW_SELECTED, EventKind.WINDOW_STATE_CHANGED)


class ConversationState:
    """Mutable conversation context. One per engine."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings            = settings or EngineSettings()
        self.chat_id             = None
        self.is_group            = False
        self.is_call_list_active = False

    def snapshot(self) -> ConversationContext:
        return ConversationContext(
            chat_id             = self.chat_id,
            is_group            = self.is_group,
            is_call_list_active = self.is_call_list_active,
        )

    def reset(self) -> None:
        self.chat_id             = None
        self.is_group            = False
        self.is_call_list_active = False

    def mark_group(self) -> None:
        """Group controls showed up inside the conversation after it opened."""
        if not self.is_group:
            logger.info(f"Late group detection: {self.chat_id or 'Unknown'} is a group")
        self.is_group = True

    # ── TRIGGERS ─────────────────────────────────────────────

    def apply(self, event: Event) -> bool:
        """
        Update state if `event` is a trigger. Returns True when it was.
        First matching rule wins.
        """
        if event.kind in CALLS_TAB_KINDS and self._is_calls_tab(event):
            self.is_call_list_active = True
            logger.info("Calls tab activated")
            return True

        if (event.kind is EventKind.WINDOW_STATE_CHANGED
                and event.class_name == self.settings.conversation_class):
            root = event.root_node
            if root is None:
                logger.warning("Source node is null for WINDOW_STATE_CHANGED")
                return False
            if not _reachable(root):
                logger.warning("Conversation window unreachable, keeping current chat")
                return False
            self.chat_id             = derive_chat_id(root, self.settings.contact_name_view_id,
                                                      self.settings.contact_patterns)
            self.is_group            = derive_is_group(root)
            self.is_call_list_active = False
            logger.info(
                f"Chat opened: {'Group' if self.is_group else 'Private'} - "
                f"{self.chat_id or 'Unknown'}"
            )
            return True

        return False

    def _is_calls_tab(self, event: Event) -> bool:
        """Source description, or the event's own when the source has none."""
        desc = None
        if event.root_node is not None:
            try:
                desc = stripped(event.root_node.content_description)
            except NodeUnavailable:
                desc = None
        if desc is None:
            desc = stripped(event.content_description)
        return desc == self.settings.calls_tab_description


# ── DERIVATION ───────────────────────────────────────────────

def derive_chat_id(root: NodeHandle, contact_view_id: str,
                   contact_patterns: List[Pattern]) -> Optional[str]:
    """
    Title of the open conversation.
    Saved contacts carry a dedicated view id; otherwise the first title-like
    text wins: a member list with a phone number, a bare "+..." number, or
    an installation-specific contact pattern.
    """
    with acquired(find_by_view_id(root, contact_view_id)) as name_node:
        if name_node is not None:
            try:
                return stripped(name_node.text)
            except NodeUnavailable:
                pass

    with released_all(find_all(root, lambda c: c == widgets.TEXT_VIEW)) as nodes:
        for node in nodes:
            text = _text(node)
            if not text:
                continue
            if (patterns.is_member_list(text)
                    or text.startswith('+')
                    or patterns.matches_any(text, contact_patterns)):
                return text
    return None


def derive_is_group(root: NodeHandle) -> bool:
    with acquired(find_by_exact_text(root, widgets.GROUP_INFO_BUTTON)) as button:
        if button is not None:
            return True

    with released_all(find_all(root, lambda c: c == widgets.TEXT_VIEW)) as nodes:
        return any(patterns.is_member_list(_text(n) or '') for n in nodes)


def _text(node: NodeHandle) -> Optional[str]:
    try:
        return stripped(node.text)
    except NodeUnavailable:
        return None


def _reachable(node: NodeHandle) -> bool:
    try:
        node.class_name
    except NodeUnavailable:
        return False
    return True
