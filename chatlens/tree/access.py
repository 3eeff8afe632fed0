"""
chatlens/tree/access.py
Generic depth-first search over a NodeHandle tree.

Every handle acquired while walking is released before returning, except
the ones handed back to the caller. Results come back in document order
(pre-order). Depth is unbounded.

A child that cannot be read (child() returns None or the node raises
NodeUnavailable) is skipped together with its subtree; its siblings are
still visited.
"""

import logging
from typing import Callable, List, Optional

from chatlens.errors import NodeUnavailable
from chatlens.tree.node import NodeHandle, acquired, stripped

logger = logging.getLogger(__name__)

NodePredicate = Callable[[NodeHandle], bool]


def find_all(root: Optional[NodeHandle], predicate: Callable[[str], bool]) -> List[NodeHandle]:
    """
    All nodes (root included) whose class name satisfies `predicate`.
    The caller owns every returned handle; when root matches, a duplicate
    of it is returned rather than root itself.
    """
    results: List[NodeHandle] = []
    if root is None:
        return results

    def _class_matches(node: NodeHandle) -> bool:
        return predicate(node.class_name)

    try:
        if _class_matches(root):
            results.append(root.duplicate())
        _collect(root, _class_matches, results)
    except NodeUnavailable:
        logger.debug("Search root became unreachable")
    except Exception:
        for h in results:
            h.release()
        raise
    return results


def _collect(parent: NodeHandle, match: NodePredicate, results: List[NodeHandle]) -> None:
    try:
        count = parent.child_count
    except NodeUnavailable:
        return

    for i in range(count):
        child = _child(parent, i)
        if child is None:
            continue
        try:
            keep = match(child)
        except NodeUnavailable:
            logger.debug(f"Skipped unreachable node at child {i}")
            child.release()
            continue
        except Exception:
            child.release()
            raise

        if keep:
            # Ownership moves to the caller; keep walking through it.
            results.append(child)
            _collect(child, match, results)
        else:
            with acquired(child):
                _collect(child, match, results)


def _child(parent: NodeHandle, index: int) -> Optional[NodeHandle]:
    try:
        return parent.child(index)
    except NodeUnavailable:
        return None


def find_first(root: Optional[NodeHandle], predicate: NodePredicate) -> Optional[NodeHandle]:
    """
    First node in document order (root included) satisfying `predicate`.
    The search stops there; the caller owns the returned handle.
    """
    if root is None:
        return None
    try:
        if predicate(root):
            return root.duplicate()
    except NodeUnavailable:
        return None
    return _first_below(root, predicate)


def _first_below(parent: NodeHandle, predicate: NodePredicate) -> Optional[NodeHandle]:
    try:
        count = parent.child_count
    except NodeUnavailable:
        return None

    for i in range(count):
        child = _child(parent, i)
        if child is None:
            continue
        try:
            matched = predicate(child)
        except NodeUnavailable:
            child.release()
            continue
        except Exception:
            child.release()
            raise

        if matched:
            return child
        with acquired(child):
            found = _first_below(child, predicate)
        if found is not None:
            return found
    return None


def find_by_view_id(root: Optional[NodeHandle], view_id: str) -> Optional[NodeHandle]:
    return find_first(root, lambda n: n.view_id == view_id)


def find_by_exact_text(root: Optional[NodeHandle], text: str) -> Optional[NodeHandle]:
    return find_first(root, lambda n: stripped(n.text) == text)
