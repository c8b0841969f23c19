"""
Domain exceptions shared by the services and the repositories.

Each resource module subclasses these (MemberNotFoundError, SlotFullError...)
and the routes translate them into HTTPException:

    NotFoundError     -> 404
    BusinessRuleError -> 400
    ConflictError     -> 409
    CapacityError     -> 409
"""


class StudioError(Exception):
    """Base class of every business error."""
    pass


class NotFoundError(StudioError):
    """Unknown identifier."""
    pass


class BusinessRuleError(StudioError):
    """Invalid input or a violated business rule."""
    pass


class ConflictError(StudioError):
    """Duplicate value or incompatible state."""
    pass


class CapacityError(ConflictError):
    """Slot capacity or stock exhausted."""
    pass
