#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterator, Optional, Union

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from record_store.db.context import Context
from record_store.db.exceptions import (ChainIntegrityError, ConflictError,
                                        ForkError, NotFoundError,
                                        OrphanParentError)
from record_store.db.models import Record, RecordTip
from record_store.utilities.config import DEFAULT_PAGE_SIZE
from record_store.utilities.datetime_format import utcnow
from record_store.utilities.log_constants import _DEFAULT_LOGGER_NAME
from record_store.utilities.record_id import SENTINEL, as_uuid

_logger = logging.getLogger(_DEFAULT_LOGGER_NAME)

UuidLike = Union[uuid.UUID, str]

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


class RecordChain:
    """Records of one (host, tag) chain in order, read lazily in pages.

    Nothing is read until iteration starts. Every iteration starts over from
    the same position and stops at the chain length seen when it started.
    """

    def __init__(self, context: Context, host: uuid.UUID, tag: str, start_idx: int, page_size: int):
        self._context = context
        self.host = host
        self.tag = tag
        self.start_idx = start_idx
        self.page_size = page_size

    def __iter__(self) -> Iterator[Record]:
        with self._context.session_scope() as session:
            tip = session.get(RecordTip, (self.host, self.tag))
            end = tip.length if tip is not None else 0

        position = self.start_idx
        while position < end:
            with self._context.session_scope() as session:
                page = (
                    session.query(Record)
                    .filter(
                        Record.host == self.host,
                        Record.tag == self.tag,
                        Record.idx >= position,
                        Record.idx < end,
                    )
                    .order_by(Record.idx)
                    .limit(self.page_size)
                    .all()
                )
            if not page:
                break
            for record in page:
                yield record
            position = page[-1].idx + 1

    def __repr__(self):
        return f"<RecordChain host={self.host} tag={self.tag} start_idx={self.start_idx}>"


class RecordService:
    """Append and read per (host, tag) record chains."""

    def __init__(self, context: Optional[Context] = None, page_size: Optional[int] = None):
        self._context = context or Context()
        self.page_size = page_size or DEFAULT_PAGE_SIZE

    # --- writes ----
    def append(self, record: Record) -> Record:
        """Persist record as the new tip of its (host, tag) chain.

        The existence checks, the tip move and the insert share one
        transaction. The tip only moves through a conditional update on the
        expected parent, so when two writers race on the same tip exactly one
        of them commits.

        Raises:
            ConflictError: record.id is already stored
            OrphanParentError: record.parent is not the sentinel and does not exist
            ForkError: record.parent is not the current tip of the chain
        """
        self._validate(record)
        record.id = as_uuid(record.id)
        record.host = as_uuid(record.host)
        record.parent = as_uuid(record.parent)

        try:
            with self._context.session_scope() as session:
                if session.get(Record, record.id) is not None:
                    raise ConflictError(record.id)

                if record.parent == SENTINEL:
                    self._start_chain(session, record)
                else:
                    self._extend_chain(session, record)

                session.add(record)
                try:
                    session.flush()
                except IntegrityError as e:
                    raise ConflictError(record.id) from e
        except (ConflictError, OrphanParentError, ForkError) as e:
            _logger.warning(f"rejected append of {record.id} to {record.host}/{record.tag}: {e}")
            raise

        _logger.info(f"appended {record.id} to {record.host}/{record.tag} at idx {record.idx}")
        return record

    def _start_chain(self, session: Session, record: Record):
        tip = session.get(RecordTip, (record.host, record.tag))
        if tip is not None:
            raise ForkError(record.host, record.tag, record.id, record.parent, tip.tip_id)

        record.idx = 0
        session.add(RecordTip(record.host, record.tag, record.user_id, record.id, length=1))
        try:
            session.flush()
        except IntegrityError as e:
            # another head for the same chain committed first
            raise ForkError(record.host, record.tag, record.id, record.parent) from e

    def _extend_chain(self, session: Session, record: Record):
        parent = session.get(Record, record.parent)
        if parent is None:
            raise OrphanParentError(record.id, record.parent)
        if parent.host != record.host or parent.tag != record.tag:
            raise ForkError(record.host, record.tag, record.id, record.parent)

        tip = session.get(RecordTip, (record.host, record.tag))
        if tip is not None and tip.user_id != record.user_id:
            # status() keeps indexing the chain under its first owner
            _logger.warning(
                f"record {record.id} for {record.host}/{record.tag} has user {record.user_id}, "
                f"chain is owned by user {tip.user_id}"
            )

        result = session.execute(
            update(RecordTip)
            .where(
                RecordTip.host == record.host,
                RecordTip.tag == record.tag,
                RecordTip.tip_id == record.parent,
            )
            .values(
                tip_id=record.id,
                length=RecordTip.length + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            session.expire_all()
            tip = session.get(RecordTip, (record.host, record.tag))
            raise ForkError(
                record.host, record.tag, record.id, record.parent, tip.tip_id if tip is not None else None
            )
        record.idx = parent.idx + 1

    @staticmethod
    def _validate(record: Record):
        missing = [
            name
            for name in ("id", "host", "timestamp", "version", "tag", "data", "user_id")
            if getattr(record, name) is None
        ]
        if missing:
            raise ValueError(f"record is missing required fields: {', '.join(missing)}")
        if not isinstance(record.data, (bytes, bytearray, memoryview)):
            raise ValueError(f"record data must be bytes, got {type(record.data).__name__}")
        for name in ("timestamp", "user_id"):
            value = getattr(record, name)
            # both land in BIGINT columns
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"record {name} must be an int, got {type(value).__name__}")
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise ValueError(f"record {name} {value} is outside the signed 64-bit range")

    # --- reads ----
    def get(self, record_id: UuidLike) -> Record:
        record_id = as_uuid(record_id)
        with self._context.session_scope() as session:
            record = session.get(Record, record_id)
        if record is None:
            raise NotFoundError(f"record {record_id} does not exist")
        return record

    def get_tip(self, host: UuidLike, tag: str) -> Optional[Record]:
        """Current tip of the chain, None when the chain has no records yet.

        Clients use the tip id as the parent of their next append.
        """
        host = as_uuid(host)
        with self._context.session_scope() as session:
            tip = session.get(RecordTip, (host, tag))
            if tip is None:
                return None
            return session.get(Record, tip.tip_id)

    def head(self, host: UuidLike, tag: str) -> Optional[Record]:
        host = as_uuid(host)
        with self._context.session_scope() as session:
            return (
                Record.get(Record.host == host, Record.tag == tag, Record.idx == 0, session=session)
                .one_or_none()
            )

    def length(self, host: UuidLike, tag: str) -> int:
        host = as_uuid(host)
        with self._context.session_scope() as session:
            tip = session.get(RecordTip, (host, tag))
            return tip.length if tip is not None else 0

    def get_chain(
        self,
        host: UuidLike,
        tag: str,
        since_id: Optional[UuidLike] = SENTINEL,
        page_size: Optional[int] = None,
    ) -> RecordChain:
        """
        Records of the (host, tag) chain oldest first, starting right after
        since_id, or at the head when since_id is the sentinel.

        Raises:
            NotFoundError: the chain does not exist, or since_id is not one of its records
        """
        host = as_uuid(host)
        since_id = as_uuid(since_id)
        with self._context.session_scope() as session:
            tip = session.get(RecordTip, (host, tag))
            if tip is None:
                raise NotFoundError(f"no chain for {host}/{tag}")

            start_idx = 0
            if since_id != SENTINEL:
                since = session.get(Record, since_id)
                if since is None or since.host != host or since.tag != tag:
                    raise NotFoundError(f"record {since_id} is not part of {host}/{tag}")
                start_idx = since.idx + 1

        _logger.debug(f"reading {host}/{tag} from idx {start_idx}")
        return RecordChain(self._context, host, tag, start_idx, page_size or self.page_size)

    def status(self, user_id: int) -> Dict[uuid.UUID, Dict[str, uuid.UUID]]:
        """tip id of every chain owned by user_id, keyed by host then tag"""
        index = {}
        with self._context.session_scope() as session:
            for tip in RecordTip.get(RecordTip.user_id == user_id, session=session):
                index.setdefault(tip.host, {})[tip.tag] = tip.tip_id
        return index

    def verify_chain(self, host: UuidLike, tag: str) -> int:
        """
        Walk a chain and check that every record links to the one before it
        and that the walk ends on the tip. Returns the number of records checked.

        Raises:
            NotFoundError: the chain does not exist
            ChainIntegrityError: on the first broken link
        """
        host = as_uuid(host)
        with self._context.session_scope() as session:
            tip = session.get(RecordTip, (host, tag))
        if tip is None:
            raise NotFoundError(f"no chain for {host}/{tag}")

        expected_parent = SENTINEL
        checked = 0
        for record in RecordChain(self._context, host, tag, 0, self.page_size):
            # appends that land during the walk are not part of this check
            if checked == tip.length:
                break
            if record.parent != expected_parent:
                raise ChainIntegrityError(
                    host, tag, record.id, f"parent is {record.parent}, expected {expected_parent}"
                )
            if record.idx != checked:
                raise ChainIntegrityError(host, tag, record.id, f"idx is {record.idx}, expected {checked}")
            expected_parent = record.id
            checked += 1

        if tip.length != checked:
            raise ChainIntegrityError(host, tag, tip.tip_id, f"tip length {tip.length}, walked {checked}")
        if tip.tip_id != expected_parent:
            raise ChainIntegrityError(host, tag, expected_parent, f"walk ended at {expected_parent}, tip is {tip.tip_id}")
        _logger.debug(f"verified {checked} records of {host}/{tag}")
        return checked
