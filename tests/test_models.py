import uuid

from record_store.db.models import Record, RecordTip
from record_store.utilities.datetime_format import format_ns
from record_store.utilities.record_id import SENTINEL


class TestRecord:
    def test_new_without_parent_is_head(self):
        host = uuid.uuid4()
        record = Record.new(host=host, tag="history", version="v0", data=b"x", user_id=1)
        assert record.parent == SENTINEL
        assert record.is_head
        assert record.host == host
        assert record.id.version == 7
        assert record.timestamp > 0

    def test_new_with_parent(self):
        parent = uuid.uuid4()
        record = Record.new(host=str(uuid.uuid4()), tag="kv", version="v0", data=b"x", user_id=1, parent=parent)
        assert record.parent == parent
        assert not record.is_head
        assert isinstance(record.host, uuid.UUID)

    def test_to_dict_covers_every_column(self):
        record = Record.new(host=uuid.uuid4(), tag="history", version="v0", data=b"x", user_id=3)
        row = record.to_dict()
        assert set(row) == {
            "id", "host", "parent", "timestamp", "version", "tag", "data", "user_id", "idx", "created_at",
        }
        assert row["user_id"] == 3


def test_tip_table_keyed_by_host_and_tag():
    assert [c.name for c in RecordTip.__table__.primary_key.columns] == ["host", "tag"]


def test_format_ns_keeps_nanoseconds():
    assert format_ns(1_000_000_000_123_456_789) == "2001-09-09T01:46:40.123456789Z"
