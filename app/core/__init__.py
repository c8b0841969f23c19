from app.core.exceptions import (
    StudioError,
    NotFoundError,
    BusinessRuleError,
    ConflictError,
    CapacityError,
)

__all__ = [
    "StudioError",
    "NotFoundError",
    "BusinessRuleError",
    "ConflictError",
    "CapacityError",
]
