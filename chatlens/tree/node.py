"""
chatlens/tree/node.py
Capability interface for one element of the observed UI tree.
To support a new host: subclass NodeHandle and implement the accessors.

Ownership rule: whoever obtains a handle (child(), duplicate(), or a
search in chatlens.tree.access) releases it exactly once. Use acquired()
or released_all() so release happens on every exit path.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional


class NodeHandle(ABC):
    """
    Borrowed reference to one on-screen element.
    Any accessor may raise NodeUnavailable once the element is gone.
    """

    @property
    @abstractmethod
    def class_name(self) -> str:
        ...

    @property
    @abstractmethod
    def text(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def content_description(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def view_id(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def child_count(self) -> int:
        ...

    @abstractmethod
    def child(self, index: int) -> Optional["NodeHandle"]:
        """New handle onto the index-th child, or None if it is gone."""
        ...

    @abstractmethod
    def duplicate(self) -> "NodeHandle":
        """New handle onto the same element, released independently."""
        ...

    @abstractmethod
    def release(self) -> None:
        ...


@contextmanager
def acquired(handle: Optional[NodeHandle]) -> Iterator[Optional[NodeHandle]]:
    """Release `handle` when the block exits, however it exits."""
    try:
        yield handle
    finally:
        if handle is not None:
            handle.release()


@contextmanager
def released_all(handles: Iterable[NodeHandle]) -> Iterator[List[NodeHandle]]:
    """Same as acquired() for a list of handles, e.g. search results."""
    handles = list(handles)
    try:
        yield handles
    finally:
        for h in handles:
            h.release()


def stripped(value: Optional[str]) -> Optional[str]:
    """Trimmed string or None. Accessor values come back as-is from the host."""
    if value is None:
        return None
    return str(value).strip()
