"""
SQLAlchemy metadata with every model registered.

Import this module (not base_class) wherever the full schema is needed:
create_all(), alembic autogenerate, tests.
"""
from app.database.base_class import Base

# Importing app.models registers every table on Base.metadata
import app.models  # noqa: F401

__all__ = ["Base"]
