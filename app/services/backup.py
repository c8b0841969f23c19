"""
JSON backup export / import of the whole studio.

The export is a plain dict (dates ISO formatted, amounts as strings) so it
can be written to a file by the client and imported back on any backend.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple, Type

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import BusinessRuleError
from app.database.base_class import Base
from app.models import (
    Invoice,
    InventoryTransaction,
    Lead,
    Member,
    MembershipPlan,
    MembershipSubscription,
    Payment,
    Product,
    SessionPlan,
    SessionPlanAllocation,
    SessionSlot,
    SlotSubscription,
    TrialBooking,
)
from app.repositories.base import Repository
from app.repositories.serialization import dict_to_model, model_to_dict
from app.services.studio_settings import SettingsStore, StudioSettingsData

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"

# Backup key -> model. Ordered so referenced rows are restored first.
COLLECTIONS: List[Tuple[str, Type[Base]]] = [
    ("session_slots", SessionSlot),
    ("membership_plans", MembershipPlan),
    ("leads", Lead),
    ("members", Member),
    ("invoices", Invoice),
    ("subscriptions", MembershipSubscription),
    ("payments", Payment),
    ("slot_subscriptions", SlotSubscription),
    ("trial_bookings", TrialBooking),
    ("products", Product),
    ("inventory_transactions", InventoryTransaction),
    ("session_plans", SessionPlan),
    ("allocations", SessionPlanAllocation),
]


class InvalidBackupError(BusinessRuleError):
    """Backup payload is not a studio export."""
    pass


class BackupService:

    def __init__(self, repo: Repository):
        self.repo = repo

    def export_all(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            key: [model_to_dict(obj) for obj in self.repo.list(model)]
            for key, model in COLLECTIONS
        }
        data["settings"] = SettingsStore(self.repo).get().model_dump(mode="json")
        data["exported_at"] = datetime.now(timezone.utc).isoformat()
        data["version"] = BACKUP_VERSION

        total = sum(len(data[key]) for key, _ in COLLECTIONS)
        logger.info(f"📦 Backup exported: {total} records")
        return data

    def _validate(self, data: Any) -> Dict[str, List[Base]]:
        """Parse every collection before touching storage."""
        if not isinstance(data, Mapping) or "version" not in data:
            raise InvalidBackupError("Invalid backup file format")

        parsed: Dict[str, List[Base]] = {}
        try:
            for key, model in COLLECTIONS:
                if key not in data:
                    continue
                rows = data[key]
                if not isinstance(rows, list) or not all(isinstance(r, Mapping) and r.get("id") for r in rows):
                    raise InvalidBackupError("Invalid backup file format")
                parsed[key] = [dict_to_model(model, row) for row in rows]
        except (ValueError, TypeError, KeyError) as e:
            raise InvalidBackupError("Invalid backup file format") from e
        return parsed

    def import_all(self, data: Any) -> Dict[str, int]:
        """
        Replace every collection present in the backup.

        Collections absent from the payload are left untouched. Either
        everything is imported or nothing is.

        Returns:
            Number of records imported per collection
        """
        parsed = self._validate(data)

        settings = None
        if data.get("settings"):
            try:
                settings = StudioSettingsData.model_validate(data["settings"])
            except PydanticValidationError as e:
                raise InvalidBackupError("Invalid backup file format") from e

        counts: Dict[str, int] = {}
        with self.repo.transaction():
            # Children first when emptying
            for key, model in reversed(COLLECTIONS):
                if key in parsed:
                    self.repo.delete_all(model)
            for key, model in COLLECTIONS:
                if key in parsed:
                    for obj in parsed[key]:
                        self.repo.add(obj)
                    counts[key] = len(parsed[key])
            if settings is not None:
                SettingsStore(self.repo).save(settings)
                counts["settings"] = 1

        logger.info(f"📥 Backup imported: {counts}")
        return counts
