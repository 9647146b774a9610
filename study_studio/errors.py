"""
Error taxonomy for the task store.

Every public operation fails with one of these instead of a raw driver error:

- EntityValidationError and its subclasses: the input was rejected before
  anything reached storage.
- DatabaseError: storage failed (constraint violation, I/O fault, malformed
  stored value). The underlying message is kept in ``detail``.
- LockFailed: exclusive access to the shared connection could not be taken.

Usage:
    try:
        await service.create_tag("Urgent", "#GGG")
    except InvalidColor as exc:
        print(exc.code, exc.message)
"""


class StudioError(Exception):
    """Base class for all task store errors."""

    code = "ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class EntityValidationError(StudioError):
    """
    Input rejected for an entity family (task, tag, user).

    Message format: "Invalid <entity> <field>: <detail>"
    """

    code = "VALIDATION_ERROR"
    field = "value"

    def __init__(self, entity: str, detail: str):
        self.entity = entity
        self.detail = detail
        super().__init__(f"Invalid {entity} {self.field}: {detail}")


class InvalidName(EntityValidationError):
    field = "name"


class InvalidStatus(EntityValidationError):
    field = "status"


class InvalidPriority(EntityValidationError):
    field = "priority"


class InvalidDate(EntityValidationError):
    field = "date"


class InvalidColor(EntityValidationError):
    field = "color"


class InvalidTag(EntityValidationError):
    field = "tag"


class EmptyUpdate(EntityValidationError):
    """Partial update called without a single field to change."""

    field = "update"


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class DatabaseError(StudioError):
    """Storage-layer failure; ``detail`` holds the underlying message."""

    code = "DATABASE_ERROR"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Database error: {detail}")


class NotFoundError(DatabaseError):
    """
    Row lookup by id found nothing.

    Usage:
        raise NotFoundError("Task", 42)
        # "Database error: Task with id=42 not found"
    """

    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: int):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} with id={resource_id} not found")


class LockFailed(StudioError):
    """The shared connection could not be locked for this call."""

    code = "LOCK_FAILED"

    def __init__(self, message: str = "Database lock failed"):
        super().__init__(message)
