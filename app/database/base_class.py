"""
SQLAlchemy declarative base.
Kept in its own module to avoid circular imports.
"""
from sqlalchemy.orm import DeclarativeBase


# Every model inherits from this class
class Base(DeclarativeBase):
    pass
