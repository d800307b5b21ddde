import pytest

from conftest import append_chain, make_record
from record_store.db.context import Context
from record_store.db.models import Record


def test_singleton(context):
    assert Context() is context


def test_session_scope_rolls_back_on_error(context, host):
    record = make_record(host)
    record.idx = 0
    with pytest.raises(RuntimeError):
        with context.session_scope() as session:
            session.add(record)
            session.flush()
            raise RuntimeError("boom")

    with context.session_scope() as session:
        assert session.get(Record, record.id) is None


def test_every_scope_gets_its_own_session(context):
    with context.session_scope() as first, context.session_scope() as second:
        assert first is not second


def test_uninitialized_context_refuses_sessions(context):
    factory = context._session_factory
    context._session_factory = None
    try:
        with pytest.raises(RuntimeError):
            context.create_new_session()
    finally:
        context._session_factory = factory


def test_query_helper(record_service, context, host):
    append_chain(record_service, host, 2, tag="history")
    append_chain(record_service, host, 1, tag="kv")

    with context.session_scope() as session:
        assert Record.get(Record.host == host, session=session).count() == 3
        kv = Record.get(Record.host == host, Record.tag == "kv", session=session).one()
    assert kv.idx == 0
