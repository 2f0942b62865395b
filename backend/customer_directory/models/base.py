"""Column mixins shared by mapped models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware "now" in UTC."""
    return datetime.now(UTC)


def new_uuid() -> str:
    """Random UUID4 in canonical hyphenated form (36 chars)."""
    return str(uuid.uuid4())


class TimestampMixin:
    """
    ``created_at`` / ``updated_at`` stamped by the application.

    Python-side defaults keep the values identical across SQLite and
    PostgreSQL and make them available right after ``flush()`` without a
    refresh round trip.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class UUIDPKMixin:
    """Opaque string primary key ``id`` generated on insert."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)


class ReprMixin:
    """``<ClassName id=...>`` representation for logs and debuggers."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"
