"""
Reusable mixins for the SQLAlchemy models.

Every table has a UUID string primary key and creation/update timestamps.
"""

from datetime import datetime, timezone

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.types import new_uuid


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UUIDPrimaryKeyMixin:
    """
    Mixin adding a UUID string primary key.

    Usage:
        class Member(UUIDPrimaryKeyMixin, TimestampMixin, Base):
            __tablename__ = "members"
    """

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_uuid,
        doc="Unique identifier",
        info={"description": "UUID4 string", "auto_generated": True}
    )


class TimestampMixin:
    """
    Mixin adding created_at and updated_at.

    - created_at : filled on insert
    - updated_at : refreshed on every update
    """

    created_at: Mapped[datetime] = mapped_column(
        default=utc_now,
        doc="Creation timestamp",
        info={"description": "Creation timestamp", "auto_generated": True}
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        default=None,
        onupdate=utc_now,
        doc="Last update timestamp",
        info={"description": "Update timestamp", "auto_generated": True}
    )
