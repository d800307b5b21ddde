import os
from dataclasses import asdict, dataclass
from typing import Any, Dict

DEFAULT_DATABASE_URI = "sqlite:///records.db"
DEFAULT_PAGE_SIZE = 100


@dataclass
class Settings:
    database_uri: str = DEFAULT_DATABASE_URI
    page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """read settings from SQLALCHEMY_DATABASE_URI and RECORD_STORE_* variables"""
        page_size = int(os.getenv("RECORD_STORE_PAGE_SIZE", DEFAULT_PAGE_SIZE))
        if page_size < 1:
            raise ValueError(f"RECORD_STORE_PAGE_SIZE must be positive, got {page_size}")
        return cls(
            database_uri=os.getenv("SQLALCHEMY_DATABASE_URI", DEFAULT_DATABASE_URI),
            page_size=page_size,
            log_level=os.getenv("RECORD_STORE_LOG_LEVEL", "INFO").upper(),
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
