"""Error taxonomy shared by the services and the scheduler.

ValidationError and ConstraintViolation subclass ValueError so callers that
only care about "bad input" can keep catching ValueError.
"""


class AppError(Exception):
    """Base class for all application errors."""


class ValidationError(AppError, ValueError):
    """Malformed input: bad recurrence rule, out-of-range day/month, bad amount."""


class ConstraintViolation(AppError, ValueError):
    """Input is well-formed but breaks a store invariant."""


class NotFound(AppError, LookupError):
    """Operation on an unknown id."""

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} #{entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id


class StorageError(AppError):
    """I/O failure from the SQLite store."""


class DeliveryError(AppError):
    """The notification display channel is unavailable."""
