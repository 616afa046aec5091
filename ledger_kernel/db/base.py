"""
Module: ledger_kernel.db.base
Responsibility: Declarative base for all ORM models.  Provides the row-id /
    uid key convention, the type annotation map, and the UTCDateTime column
    type.
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel; MUST NOT import from models/, services/, selectors/ or domain/.

Invariants enforced:
    - Every row has two keys: ``id``, an autoincrement integer used only by
      the store, and ``uid``, a unique 32-character string that every other
      layer uses to refer to the row.
    - Timestamps round-trip as timezone-aware UTC on every backend,
      including SQLite, which stores no offset.

Failure modes:
    - IntegrityError on a duplicate uid.
    - ValueError when a naive datetime is bound to a UTCDateTime column.
"""

from datetime import datetime, timezone
from typing import ClassVar
from uuid import uuid4

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from ledger_kernel.db.types import AmountPart, CurrencyCode, LongText, ShortCode, UidRef


def new_uid() -> str:
    """Fresh unique identifier (32 lowercase hex characters)."""
    return uuid4().hex


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored as naive UTC.

    Guarantees:
        - process_bind_param: aware datetime -> naive UTC on INSERT/UPDATE.
        - process_result_value: naive value -> aware UTC on SELECT.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime cannot be stored: {value!r}")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """
    Declarative base for all ledger models.

    Guarantees:
        - id is an autoincrement integer primary key.
        - uid is unique, non-null and defaults to new_uid().
        - datetime maps to UTCDateTime; the db.types aliases map to their
          declared column types.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: UTCDateTime(),
        str: String(255),
        AmountPart: BigInteger(),
        CurrencyCode: String(3),
        UidRef: String(32),
        ShortCode: String(20),
        LongText: String(2048),
    }

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    uid: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
        default=new_uid,
    )
