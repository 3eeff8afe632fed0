"""
chatlens/capture.py
Reads event captures: JSON lines, one accessibility event per line, each
with the source node tree nested under "source".

  {"package": "com.whatsapp", "type": "WINDOW_STATE_CHANGED",
   "time_ms": 1704067200000, "class_name": "com.whatsapp.Conversation",
   "source": {"class": "android.widget.FrameLayout", "children": [...]}}

"type" may be a name or Android's integer constant. Blank lines and lines
starting with '#' are ignored. A malformed line is logged and skipped.
"""

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from chatlens.models.event import Event, EventKind
from chatlens.tree.memory import HandleLedger, open_tree
from chatlens.tree.node import acquired

logger = logging.getLogger(__name__)


def read_capture(path: Path) -> Iterator[Dict[str, Any]]:
    with open(path, encoding='utf-8') as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning(f"{Path(path).name}:{lineno}: skipped malformed line: {e}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"{Path(path).name}:{lineno}: skipped non-object line")
                continue
            yield data


@contextmanager
def replay_event(data: Dict[str, Any], ledger: Optional[HandleLedger] = None) -> Iterator[Event]:
    """
    Build an Event from one capture line. The source tree is opened for the
    duration of the block and its root handle released afterwards, the way
    a host lends its event source for one callback.
    """
    root = open_tree(data.get('source'), ledger)
    with acquired(root):
        yield Event(
            package_name        = str(data.get('package') or data.get('package_name') or ''),
            kind                = EventKind.parse(data.get('type', data.get('kind'))),
            time_ms             = _int_or_none(data.get('time_ms')),
            class_name          = data.get('class_name'),
            content_description = data.get('desc', data.get('content_description')),
            root_node           = root,
        )


def _int_or_none(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
