"""
Custom SQLAlchemy column types for Studio Manager.

The same models run on PostgreSQL (production), SQLite (tests, local
development) and the JSON file repository.
"""

import uuid
from enum import Enum
from typing import Type

from sqlalchemy import JSON, Enum as SQLEnum, Text
from sqlalchemy.dialects.postgresql import JSONB


# ============================================================================
# JSONBCompatible - multi-dialect JSON type
# ============================================================================
#
# - PostgreSQL : JSONB
# - SQLite/others : plain JSON
#
# Usage:
#     from app.models.types import JSONBCompatible
#
#     class Member(Base):
#         medical_conditions: Mapped[list] = mapped_column(JSONBCompatible, default=list)
#
# ============================================================================

JSONBCompatible = JSON().with_variant(JSONB(astext_type=Text()), 'postgresql')


# ============================================================================
# Enums stored by value
# ============================================================================
#
# SQLAlchemy persists the member NAME by default ("WALK_IN"). The API and
# the JSON store both speak in values ("walk-in"), so columns store values.

def enum_column(enum_class: Type[Enum], name: str) -> SQLEnum:
    return SQLEnum(
        enum_class,
        name=name,
        create_constraint=True,
        native_enum=False,
        length=30,
        values_callable=lambda members: [m.value for m in members],
    )


# ============================================================================
# Identifiers
# ============================================================================

def new_uuid() -> str:
    """Primary key generator: UUID4 as a 36 character string."""
    return str(uuid.uuid4())
