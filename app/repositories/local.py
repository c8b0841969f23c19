"""
JSON file implementation of the Repository interface.

The whole studio lives in one JSON document keyed by table name:

    {
      "members": {"<id>": {...row...}, ...},
      "membership_subscriptions": {...},
      ...
    }

Selected with ``STORAGE_BACKEND=local``. Meant for a single studio running
on one machine; a process-local lock serialises writers.
"""

import copy
import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from app.database.base_class import Base
from app.models.mixins import utc_now
from app.repositories.base import ModelT, Repository
from app.repositories.serialization import (
    apply_column_defaults,
    dict_to_model,
    iter_columns,
    model_to_dict,
    to_json_value,
)

logger = logging.getLogger(__name__)


class JsonFileRepository(Repository):
    """
    Repository persisting to a single JSON file.

    Entities returned by get/list are detached copies: changes are only
    stored by passing the instance back to ``save``.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._depth = 0
        self._data: Dict[str, Dict[str, dict]] = self._read()

    # === File I/O ===

    def _read(self) -> Dict[str, Dict[str, dict]]:
        if not self.path.exists():
            logger.info(f"📄 New local store at {self.path}")
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def _persist(self) -> None:
        if not self._depth:
            self._write()

    def _table(self, model: Type[Base]) -> Dict[str, dict]:
        return self._data.setdefault(model.__tablename__, {})

    # === Reads ===

    def get(self, model: Type[ModelT], id: Any) -> Optional[ModelT]:
        if id is None:
            return None
        with self._lock:
            row = self._table(model).get(str(id))
            return dict_to_model(model, row) if row is not None else None

    def list(
        self,
        model: Type[ModelT],
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[ModelT]:
        columns = dict(iter_columns(model))
        wanted = {}
        for name, value in filters.items():
            column = columns[name]
            if isinstance(value, (list, tuple, set, frozenset)):
                wanted[name] = {to_json_value(column, v) for v in value}
            else:
                wanted[name] = {to_json_value(column, value)}

        with self._lock:
            rows = [
                row for row in self._table(model).values()
                if all(row.get(name) in values for name, values in wanted.items())
            ]
            items = [dict_to_model(model, row) for row in rows]

        if order_by:
            items.sort(
                key=lambda obj: (getattr(obj, order_by) is None, getattr(obj, order_by)),
                reverse=descending,
            )
        return items

    # === Writes ===

    def add(self, obj: ModelT) -> ModelT:
        apply_column_defaults(obj)
        with self._lock:
            self._table(type(obj))[str(obj.id)] = model_to_dict(obj)
            self._persist()
        return obj

    def save(self, obj: ModelT) -> ModelT:
        if hasattr(obj, "updated_at"):
            obj.updated_at = utc_now()
        with self._lock:
            self._table(type(obj))[str(obj.id)] = model_to_dict(obj)
            self._persist()
        return obj

    def delete(self, obj: Base) -> None:
        with self._lock:
            self._table(type(obj)).pop(str(obj.id), None)
            self._persist()

    def delete_all(self, model: Type[Base]) -> None:
        with self._lock:
            self._data[model.__tablename__] = {}
            self._persist()

    # === Transaction ===

    @contextmanager
    def transaction(self):
        with self._lock:
            snapshot = copy.deepcopy(self._data) if self._depth == 0 else None
            self._depth += 1
            try:
                yield self
            except Exception:
                self._depth -= 1
                if self._depth == 0:
                    self._data = snapshot
                    logger.warning("↩️ Local store transaction rolled back")
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    self._write()
