import uuid
from typing import Optional


class RecordStoreError(Exception):
    """Base class for every error raised by the record store"""


class ConflictError(RecordStoreError):
    """A record with the same id already exists"""

    def __init__(self, record_id: uuid.UUID):
        self.record_id = record_id
        super().__init__(f"record {record_id} already exists")


class OrphanParentError(RecordStoreError):
    """The parent named by a new record does not exist"""

    def __init__(self, record_id: uuid.UUID, parent: uuid.UUID):
        self.record_id = record_id
        self.parent = parent
        super().__init__(f"parent {parent} of record {record_id} does not exist")


class ForkError(RecordStoreError):
    """The parent named by a new record is not the current tip of its chain"""

    def __init__(
        self,
        host: uuid.UUID,
        tag: str,
        record_id: uuid.UUID,
        parent: uuid.UUID,
        tip: Optional[uuid.UUID] = None,
    ):
        self.host = host
        self.tag = tag
        self.record_id = record_id
        self.parent = parent
        self.tip = tip
        super().__init__(
            f"record {record_id} would fork {host}/{tag}: parent {parent} is not the tip ({tip})"
        )


class NotFoundError(RecordStoreError):
    """No chain or record matched the request"""


class ChainIntegrityError(RecordStoreError):
    """A stored chain does not link up"""

    def __init__(self, host: uuid.UUID, tag: str, record_id: Optional[uuid.UUID], reason: str):
        self.host = host
        self.tag = tag
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"chain {host}/{tag} broken at {record_id}: {reason}")
