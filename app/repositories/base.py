"""
Repository interface.

Every service talks to persistence through this interface only, so the
same business code runs on the SQL database or on the local JSON file.

Filters passed to ``list`` are equality tests on column attributes. A
list/tuple/set value means "one of":

    repo.list(MembershipSubscription, member_id=member.id,
              status=[SubscriptionStatus.ACTIVE, SubscriptionStatus.SCHEDULED])

Multi-entity writes go through ``transaction()``:

    with repo.transaction():
        repo.add(subscription)
        repo.add(invoice)
        # both written, or neither
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, List, Optional, Type, TypeVar

from app.database.base_class import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(ABC):

    @abstractmethod
    def get(self, model: Type[ModelT], id: Any) -> Optional[ModelT]:
        """Entity by primary key, or None."""

    @abstractmethod
    def list(
        self,
        model: Type[ModelT],
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[ModelT]:
        """Entities matching every equality filter."""

    @abstractmethod
    def add(self, obj: ModelT) -> ModelT:
        """Persist a new entity (column defaults are applied)."""

    @abstractmethod
    def save(self, obj: ModelT) -> ModelT:
        """Persist changes made to an entity returned by get/list."""

    @abstractmethod
    def delete(self, obj: Base) -> None:
        pass

    @abstractmethod
    def delete_all(self, model: Type[Base]) -> None:
        """Empty a table (backup restore)."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Atomic block.

        Writes inside the block become visible to later reads of the same
        block and are persisted together when the outermost block exits
        cleanly. Any exception discards all of them and is re-raised.
        """

    def count(self, model: Type[Base], **filters: Any) -> int:
        return len(self.list(model, **filters))

    def first(self, model: Type[ModelT], **filters: Any) -> Optional[ModelT]:
        rows = self.list(model, **filters)
        return rows[0] if rows else None
