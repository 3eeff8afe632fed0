"""
chatlens/batcher.py
Walks the list container of the current screen and turns its direct
children into an ordered tuple of records.

Chat screen  → first ListView,     message rules
Calls tab    → first RecyclerView, call rules

A child that disappears or trips a classifier fault is logged and skipped;
the remaining children are still processed. Records keep the children's
order.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Tuple

from chatlens.classifiers.node_classifier import NodeClassifier
from chatlens.errors import NodeUnavailable
from chatlens.models.record import ConversationContext, Record
from chatlens.tree.access import find_all
from chatlens.tree.node import NodeHandle, acquired, released_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Records from one container, plus whether group controls were seen."""
    records:    Tuple[Record, ...] = ()
    group_hint: bool               = False
    found:      bool               = False     # a container was located


class RecordBatcher:

    def __init__(self, container_class: str, classifier: NodeClassifier):
        self.container_class = container_class
        self.classifier      = classifier

    def collect(self, root: NodeHandle, ctx: ConversationContext) -> BatchResult:
        with released_all(find_all(root, lambda c: c == self.container_class)) as containers:
            if not containers:
                logger.debug(f"No {self.container_class} found in node tree")
                return BatchResult()
            return self._walk(containers[0], ctx)

    def _walk(self, container: NodeHandle, ctx: ConversationContext) -> BatchResult:
        records: List[Record] = []
        group_hint = False

        try:
            count = container.child_count
        except NodeUnavailable:
            logger.debug(f"{self.container_class} vanished before it was read")
            return BatchResult(found=True)

        logger.debug(f"Processing {self.container_class} with {count} children")
        for i in range(count):
            result = self._classify_child(container, i, ctx)
            if result is None:
                continue
            if result.group_hint:
                # Later entries in this batch are attributed to a group chat.
                ctx = replace(ctx, is_group=True)
                group_hint = True
            if result.record is not None:
                records.append(result.record)

        return BatchResult(records=tuple(records), group_hint=group_hint, found=True)

    def _classify_child(self, container: NodeHandle, index: int, ctx: ConversationContext):
        try:
            child = container.child(index)
        except NodeUnavailable:
            return None
        if child is None:
            return None
        with acquired(child):
            try:
                return self.classifier.classify(child, ctx)
            except NodeUnavailable:
                logger.debug(f"Skipped unreachable entry {index}")
            except Exception as e:
                logger.debug(f"Skipped entry {index}: {e}")
        return None

