"""
chatlens/exporters/sinks.py
Where finished batches go. The engine hands each batch to its sinks and
moves on; a sink that fails is logged by the engine and never stops the
next event.
To add a destination: subclass BatchSink and implement emit().
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable

from chatlens.exporters.serialize import batch_to_json
from chatlens.models.record import Batch

logger = logging.getLogger(__name__)


class BatchSink(ABC):

    @abstractmethod
    def emit(self, batch: Batch) -> None:
        ...


class LogSink(BatchSink):
    """Writes each batch as pretty JSON to the log, one entry per batch."""

    LABELS = {'chat': 'Chat', 'calls': 'Calls'}

    def __init__(self, log: logging.Logger = logger, level: int = logging.INFO, indent: int = 2):
        self.log    = log
        self.level  = level
        self.indent = indent

    def emit(self, batch: Batch) -> None:
        label = self.LABELS.get(batch.batch_type, batch.batch_type)
        self.log.log(self.level, f"Structured Log ({label}): {batch_to_json(batch, self.indent)}")


class CallbackSink(BatchSink):
    """Hands batches to any callable, e.g. an upload queue's put()."""

    def __init__(self, callback: Callable[[Batch], None]):
        self.callback = callback

    def emit(self, batch: Batch) -> None:
        self.callback(batch)
