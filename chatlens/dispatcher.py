"""
chatlens/dispatcher.py
Entry point driven by each accessibility event.

  on_event(event) → Batch | None

Per event, in order:
  1. Drop events from any app other than the target (no tree access, no
     wait on the event lock).
  2. Number the event.
  3. Let the state tracker react to trigger events.
  4. On content-changed / scrolled: batch the Calls list or the chat list.
  5. Hand the batch to the sinks.

Nothing here is fatal: a fault while processing one event is logged and
that event yields no batch. Events are processed one at a time under a
single lock, so hosts may deliver from several threads.
"""

import json
import logging
import threading
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from chatlens.batcher import RecordBatcher
from chatlens.classifiers.active_call import detect_active_calls
from chatlens.classifiers.node_classifier import CALL_RULES, MESSAGE_RULES, NodeClassifier
from chatlens.config import EngineSettings
from chatlens.exporters.serialize import record_to_dict
from chatlens.exporters.sinks import BatchSink
from chatlens.models.event import Event, EventKind
from chatlens.models.record import Batch
from chatlens.state import ConversationState
from chatlens.tree.node import NodeHandle

logger = logging.getLogger(__name__)

CONTENT_KINDS = (EventKind.WINDOW_CONTENT_CHANGED, EventKind.VIEW_SCROLLED)


class ChatLensEngine:
    """
    One monitoring session. Owns the conversation state and the event
    counter; both live as long as the engine.

    Usage:
        engine = ChatLensEngine(sinks=[LogSink()])
        batch  = engine.on_event(event)
    """

    def __init__(
        self,
        settings: Optional[EngineSettings]       = None,
        sinks:    Optional[Sequence[BatchSink]]  = None,
        clock:    Callable[[], float]            = time.time,
    ):
        self.settings = settings or EngineSettings()
        self.sinks: List[BatchSink] = list(sinks or [])
        self.state    = ConversationState(self.settings)
        self._clock   = clock
        self._lock    = threading.Lock()
        self._ignored_lock = threading.Lock()

        self._event_counter = 0
        self._ignored       = 0
        self._batches       = 0
        self._sink_errors   = 0

        self.chat_batcher = RecordBatcher(self.settings.message_list_class,
                                          NodeClassifier(MESSAGE_RULES))
        self.call_batcher = RecordBatcher(self.settings.call_list_class,
                                          NodeClassifier(CALL_RULES))

    # ── ENTRY POINT ──────────────────────────────────────────

    def on_event(self, event: Event) -> Optional[Batch]:
        if event.package_name != self.settings.target_package:
            with self._ignored_lock:
                self._ignored += 1
            return None

        with self._lock:
            try:
                batch = self._process(event)
            except Exception as e:
                logger.error(f"Event #{self._event_counter} failed: {e}", exc_info=True)
                return None
            if batch is not None:
                self._batches += 1
                self._emit(batch)
            return batch

    def on_interrupt(self) -> Dict[str, int]:
        """
        Host is stopping delivery. Logs and returns the session totals and
        forgets the conversation context, which is stale once delivery resumes.
        """
        with self._lock:
            stats = self.stats()
            self.state.reset()
        logger.info(
            f"Session interrupted. Events: {stats['events']} | "
            f"Ignored: {stats['ignored']} | Batches: {stats['batches']}"
        )
        return stats

    def stats(self) -> Dict[str, int]:
        return {
            "events":      self._event_counter,
            "ignored":     self._ignored,
            "batches":     self._batches,
            "sink_errors": self._sink_errors,
        }

    # ── PIPELINE ─────────────────────────────────────────────

    def _process(self, event: Event) -> Optional[Batch]:
        self._event_counter += 1
        event_id = self._event_counter
        time_ms  = event.time_ms if event.time_ms is not None else int(self._clock() * 1000)
        logger.debug(f"Event #{event_id} [{_epoch_to_str(time_ms)}] Type: {event.kind.name}")

        self.state.apply(event)

        if event.kind not in CONTENT_KINDS:
            return None
        if event.root_node is None:
            logger.warning(f"Source node is null for event type: {event.kind.name}")
            return None
        return self._collect(event.root_node, event_id, time_ms)

    def _collect(self, root: NodeHandle, event_id: int, time_ms: int) -> Optional[Batch]:
        ctx = self.state.snapshot()

        if ctx.is_call_list_active:
            batch_type   = 'calls'
            active_calls = ()
            result       = self.call_batcher.collect(root, ctx)
        else:
            batch_type   = 'chat'
            active_calls = tuple(detect_active_calls(root)) if self.settings.detect_active_calls else ()
            for call in active_calls:
                logger.info(
                    f"Structured Log (Active Call): "
                    f"{json.dumps(record_to_dict(call), indent=2, ensure_ascii=False)}"
                )
            result       = self.chat_batcher.collect(root, ctx)
            if result.group_hint:
                self.state.mark_group()
                ctx = self.state.snapshot()

        if not result.records:
            if result.found:
                logger.debug(f"No records parsed for event #{event_id}")
            return None

        return Batch(
            event_id     = event_id,
            time_ms      = time_ms,
            date_str     = _epoch_to_str(time_ms),
            batch_type   = batch_type,
            context      = ctx,
            records      = result.records,
            active_calls = active_calls,
        )

    def _emit(self, batch: Batch) -> None:
        for sink in self.sinks:
            try:
                sink.emit(batch)
            except Exception as e:
                self._sink_errors += 1
                logger.error(f"Sink {type(sink).__name__} failed for event #{batch.event_id}: {e}")


def _epoch_to_str(epoch_ms: int) -> str:
    try:
        return datetime.fromtimestamp(epoch_ms / 1000).strftime('%Y-%m-%d %H:%M:%S')
    except (OSError, OverflowError, ValueError):
        return 'INVALID_DATE'
