import uuid

import pytest

from record_store.db.context import Context
from record_store.db.models import Record
from record_store.db.services.record_service import RecordService


@pytest.fixture
def context(tmp_path):
    """Context bound to a fresh sqlite file, shared by every thread of the test."""
    ctx = Context()
    ctx.init_session(
        f"sqlite:///{tmp_path / 'records.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    ctx.create_tables()
    yield ctx
    ctx.drop_tables()
    ctx.dispose()


@pytest.fixture
def record_service(context):
    # small pages so chain reads cross page boundaries
    return RecordService(context, page_size=2)


@pytest.fixture
def host():
    return uuid.uuid4()


def make_record(host, parent=None, tag="history", user_id=1, data=b"\x00encrypted", version="v0"):
    return Record.new(host=host, tag=tag, version=version, data=data, user_id=user_id, parent=parent)


def append_chain(service, host, count, tag="history", user_id=1):
    """append count linked records and return them oldest first"""
    records = []
    parent = None
    for i in range(count):
        record = service.append(make_record(host, parent=parent, tag=tag, user_id=user_id, data=bytes([i])))
        records.append(record)
        parent = record.id
    return records
