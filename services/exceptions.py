"""
Exception hierarchy raised by the engine and the service layer.

Routes never build error responses for these themselves; routes/errors.py
maps each class to an HTTP status.
"""


class SkillForgeError(Exception):
    """Base class for every domain error."""
    status_code = 500


class ValidationError(SkillForgeError, ValueError):
    """Input is malformed or out of range."""
    status_code = 400


class PermissionDeniedError(SkillForgeError):
    """Caller lacks the role required for the operation."""
    status_code = 403


class NotFoundError(SkillForgeError, LookupError):
    """A referenced entity does not exist."""
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(SkillForgeError):
    """The operation would duplicate an existing record."""
    status_code = 409


class InvalidTransitionError(SkillForgeError):
    """The entity's current state does not allow the requested change."""
    status_code = 409


class DataIntegrityError(SkillForgeError):
    """Stored data references something that no longer exists."""
    status_code = 409
