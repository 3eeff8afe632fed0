"""
chatlens/exporters/serialize.py
Batch → JSON-serializable dict.

Each record carries its variant tag under "type" followed by its present
fields only; None-valued fields are omitted, never null-padded. Context
fields sit at the top level of the batch, as the structured log expects.
"""

import json
from dataclasses import fields
from typing import Any, Dict, Optional

from chatlens.models.record import Batch


def record_to_dict(record) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": record.record_type}
    for f in fields(record):
        if f.name == 'record_type':
            continue
        value = getattr(record, f.name)
        if value is not None:
            out[f.name] = value
    return out


def batch_to_dict(batch: Batch) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "event_id":  batch.event_id,
        "timestamp": batch.time_ms,
        "date_str":  batch.date_str,
        "type":      batch.batch_type,
    }
    if batch.context.chat_id is not None:
        out["chat_id"] = batch.context.chat_id
    out["is_group"]            = batch.context.is_group
    out["is_call_list_active"] = batch.context.is_call_list_active
    out["items"]               = [record_to_dict(r) for r in batch.records]
    if batch.active_calls:
        out["active_calls"] = [record_to_dict(c) for c in batch.active_calls]
    return out


def batch_to_json(batch: Batch, indent: Optional[int] = 2) -> str:
    return json.dumps(batch_to_dict(batch), indent=indent, ensure_ascii=False)
