"""
SQLAlchemy implementation of the Repository interface.

Outside a transaction every write commits immediately. Inside
``transaction()`` writes are only flushed, and the outermost block commits
(or rolls back on error).
"""

import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Type

from sqlalchemy import delete as sql_delete, select
from sqlalchemy.orm import Session

from app.database.base_class import Base
from app.repositories.base import ModelT, Repository

logger = logging.getLogger(__name__)


class SqlRepository(Repository):
    """
    Repository over a SQLAlchemy session.

    Usage:
        repo = SqlRepository(SessionLocal())
        with repo.transaction():
            repo.add(member)
    """

    def __init__(self, session: Session):
        self.session = session
        self._depth = 0

    # === Reads ===

    def get(self, model: Type[ModelT], id: Any) -> Optional[ModelT]:
        if id is None:
            return None
        return self.session.get(model, id)

    def list(
        self,
        model: Type[ModelT],
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[ModelT]:
        stmt = select(model)

        for name, value in filters.items():
            column = getattr(model, name)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)

        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        return list(self.session.scalars(stmt).all())

    # === Writes ===

    def add(self, obj: ModelT) -> ModelT:
        self.session.add(obj)
        self._flush_or_commit()
        return obj

    def save(self, obj: ModelT) -> ModelT:
        self.session.add(obj)
        self._flush_or_commit()
        return obj

    def delete(self, obj: Base) -> None:
        self.session.delete(obj)
        self._flush_or_commit()

    def delete_all(self, model: Type[Base]) -> None:
        self.session.execute(sql_delete(model))
        self._flush_or_commit()

    def _flush_or_commit(self) -> None:
        if self._depth:
            self.session.flush()
            return
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # === Transaction ===

    @contextmanager
    def transaction(self):
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                self.session.rollback()
                logger.warning("↩️ Transaction rolled back")
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                try:
                    self.session.commit()
                except Exception:
                    self.session.rollback()
                    raise

    def close(self) -> None:
        self.session.close()
