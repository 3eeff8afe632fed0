"""
chatlens
Accessibility-event extraction engine. Rebuilds chat messages, call
entries and group events from the on-screen element tree of a messaging
app, one event at a time.
"""

from chatlens.config import EngineSettings
from chatlens.dispatcher import ChatLensEngine
from chatlens.models.event import Event, EventKind
from chatlens.models.record import Batch

__version__ = '1.0.0'

__all__ = [
    "Batch",
    "ChatLensEngine",
    "EngineSettings",
    "Event",
    "EventKind",
]
