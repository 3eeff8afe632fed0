"""
tests/test_exporters.py
Batch serialization and the log sink.
"""

import json
import logging

from chatlens.exporters.serialize import batch_to_dict, batch_to_json, record_to_dict
from chatlens.exporters.sinks import LogSink
from chatlens.models.record import (
    ActiveCallRecord,
    Batch,
    CallRecord,
    ConversationContext,
    MessageRecord,
    SystemEventRecord,
    UnreadMarker,
)


def _chat_batch(**overrides):
    fields = dict(
        event_id   = 7,
        time_ms    = 1704067200000,
        date_str   = '2024-01-01 00:00:00',
        batch_type = 'chat',
        context    = ConversationContext(chat_id="Alice", is_group=False),
        records    = (
            MessageRecord(text="Hi there", is_outgoing=True, delivery_status="Read", chat_id="Alice"),
            UnreadMarker(count=2, chat_id="Alice"),
            SystemEventRecord(text="5 members", kind="group_info", chat_id="Alice"),
        ),
    )
    fields.update(overrides)
    return Batch(**fields)


class TestRecordToDict:

    def test_absent_fields_omitted(self):
        d = record_to_dict(MessageRecord(text="Hello"))
        assert d == {"type": "message", "text": "Hello", "is_outgoing": False, "is_group": False}

    def test_tag_comes_first(self):
        d = record_to_dict(CallRecord(name="Alice", direction="Outgoing"))
        assert list(d)[0] == "type"
        assert d == {"type": "call", "name": "Alice", "direction": "Outgoing"}

    def test_unread_without_count(self):
        assert record_to_dict(UnreadMarker()) == {"type": "unread_marker", "is_group": False}


class TestBatchToDict:

    def test_envelope(self):
        d = batch_to_dict(_chat_batch())
        assert list(d) == ["event_id", "timestamp", "date_str", "type", "chat_id",
                           "is_group", "is_call_list_active", "items"]
        assert d["event_id"] == 7
        assert d["type"] == "chat"
        assert [i["type"] for i in d["items"]] == ["message", "unread_marker", "system_event"]

    def test_unknown_chat_id_omitted(self):
        d = batch_to_dict(_chat_batch(context=ConversationContext()))
        assert "chat_id" not in d

    def test_active_calls_only_when_present(self):
        assert "active_calls" not in batch_to_dict(_chat_batch())
        d = batch_to_dict(_chat_batch(active_calls=(ActiveCallRecord(contact="Bob", direction="Incoming"),)))
        assert d["active_calls"] == [{"type": "active_call", "contact": "Bob", "direction": "Incoming"}]

    def test_json_is_parseable(self):
        text = batch_to_json(_chat_batch(), indent=None)
        assert "\n" not in text
        assert json.loads(text)["items"][0]["text"] == "Hi there"

    def test_non_ascii_kept(self):
        batch = _chat_batch(records=(MessageRecord(text="¿Qué tal? 👋"),))
        assert "👋" in batch_to_json(batch)


class TestLogSink:

    def test_logs_structured_chat_entry(self, caplog):
        caplog.set_level(logging.INFO, logger="chatlens")
        LogSink().emit(_chat_batch())
        assert "Structured Log (Chat):" in caplog.text
        assert '"event_id": 7' in caplog.text

    def test_calls_label(self, caplog):
        caplog.set_level(logging.INFO, logger="chatlens")
        LogSink().emit(_chat_batch(batch_type='calls', records=(CallRecord(name="Alice"),)))
        assert "Structured Log (Calls):" in caplog.text
