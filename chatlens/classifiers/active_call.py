"""
chatlens/classifiers/active_call.py
Detects a running voice call from the toolbar buttons of an open chat.
The button description reads "WhatsApp voice call with Alice - Outgoing call";
anything else mentioning a voice call is kept as raw text.
"""

import logging
from typing import List

from chatlens import patterns, widgets
from chatlens.errors import NodeUnavailable
from chatlens.models.record import ActiveCallRecord
from chatlens.tree.access import find_all
from chatlens.tree.node import NodeHandle, released_all, stripped

logger = logging.getLogger(__name__)


def detect_active_calls(root: NodeHandle) -> List[ActiveCallRecord]:
    calls: List[ActiveCallRecord] = []
    with released_all(find_all(root, lambda c: c == widgets.BUTTON)) as buttons:
        for button in buttons:
            try:
                desc = stripped(button.content_description)
            except NodeUnavailable:
                continue
            if not desc or widgets.ACTIVE_CALL_HINT not in desc:
                continue
            parsed = patterns.parse_call_description(desc)
            if parsed:
                contact, direction = parsed
                calls.append(ActiveCallRecord(contact=contact, direction=direction))
            else:
                calls.append(ActiveCallRecord(raw_description=desc))
    if calls:
        logger.info(f"Active call detected ({len(calls)})")
    return calls
