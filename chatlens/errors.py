"""
chatlens/errors.py
Exception types. None of these are fatal to the engine: traversal and
classification catch them locally and skip the affected node.
"""


class ChatLensError(Exception):
    """Base class for chatlens errors."""


class NodeUnavailable(ChatLensError):
    """The element behind a handle disappeared while it was being read."""


class HandleError(ChatLensError):
    """A handle was released twice or used after release."""


class ConfigError(ChatLensError):
    """A configuration value has the wrong type or shape."""
