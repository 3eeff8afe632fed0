"""
chatlens/exporters — batch serialization and sinks.
"""

from chatlens.exporters.serialize import batch_to_dict, batch_to_json, record_to_dict
from chatlens.exporters.sinks import BatchSink, CallbackSink, LogSink

__all__ = [
    "BatchSink",
    "CallbackSink",
    "LogSink",
    "batch_to_dict",
    "batch_to_json",
    "record_to_dict",
]
