#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import (BigInteger, Column, DateTime, Index, LargeBinary, Text,
                        Uuid)
from sqlalchemy.sql.schema import UniqueConstraint

from record_store.db.context import Context
from record_store.db.mixin import Base
from record_store.utilities.datetime_format import utcnow
from record_store.utilities.record_id import (SENTINEL, as_uuid,
                                              new_record_id, now_ns)


class Record(Context().db_base, Base):
    """
    One entry of a per host, per tag log. Records of the same (host, tag)
    form a singly linked list through parent; the head points at the nil uuid.
    data is encrypted by the client and stored as is.
    """

    __tablename__ = "records"

    id = Column(Uuid, primary_key=True, nullable=False)
    host = Column(Uuid, nullable=False)
    parent = Column(Uuid, nullable=False)
    # nanoseconds since the epoch, a DateTime column would lose precision
    timestamp = Column(BigInteger, nullable=False)
    version = Column(Text, nullable=False)
    tag = Column(Text, nullable=False)
    data = Column(LargeBinary, nullable=False)
    user_id = Column(BigInteger, index=True, nullable=False)
    # position in the chain, head is 0; assigned by the store on append
    idx = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("host", "tag", "idx", name="_records_host_tag_idx_uc"),
        Index("ix_records_parent", "parent"),
    )

    def __init__(
        self,
        id: uuid.UUID,
        host: uuid.UUID,
        parent: Optional[uuid.UUID],
        timestamp: int,
        version: str,
        tag: str,
        data: bytes,
        user_id: int,
    ):
        self.id = id
        self.host = host
        self.parent = as_uuid(parent)
        self.timestamp = timestamp
        self.version = version
        self.tag = tag
        self.data = data
        self.user_id = user_id

    @classmethod
    def new(
        cls,
        host: uuid.UUID,
        tag: str,
        version: str,
        data: bytes,
        user_id: int,
        parent: Optional[uuid.UUID] = None,
    ) -> Record:
        """build a record with a fresh time ordered id and the current timestamp"""
        return cls(
            id=new_record_id(),
            host=as_uuid(host),
            parent=parent,
            timestamp=now_ns(),
            version=version,
            tag=tag,
            data=data,
            user_id=user_id,
        )

    @property
    def is_head(self) -> bool:
        return self.parent == SENTINEL

    def __repr__(self):
        return f"<Record id={self.id} host={self.host} tag={self.tag} idx={self.idx} parent={self.parent}>"


class RecordTip(Context().db_base, Base):
    """
    Current tip of each (host, tag) chain. Appends move tip_id with a
    conditional update, so only one writer can extend a given tip.
    """

    __tablename__ = "record_tips"

    host = Column(Uuid, primary_key=True, nullable=False)
    tag = Column(Text, primary_key=True, nullable=False)
    user_id = Column(BigInteger, index=True, nullable=False)
    tip_id = Column(Uuid, nullable=False)
    length = Column(BigInteger, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __init__(self, host: uuid.UUID, tag: str, user_id: int, tip_id: uuid.UUID, length: int = 1):
        self.host = host
        self.tag = tag
        self.user_id = user_id
        self.tip_id = tip_id
        self.length = length

    def __repr__(self):
        return f"<RecordTip host={self.host} tag={self.tag} tip_id={self.tip_id} length={self.length}>"
