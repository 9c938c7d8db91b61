"""
Error taxonomy shared by the submission pipeline and moderation.

Field-level validation failures are normally reported as lists of
FieldViolation records; ValidationError is the raised form used where an
operation has to abort.
"""

from __future__ import annotations


class DirectoryError(Exception):
    """Base error for directory and blog operations."""

    code = "error"


class ValidationError(DirectoryError):
    """A field failed validation."""

    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class AuthRequired(DirectoryError):
    """No signed-in actor, or the actor may not perform the action."""

    code = "auth_required"

    def __init__(self, message: str = "You must be logged in to continue") -> None:
        self.message = message
        super().__init__(message)


class AssetUploadFailed(DirectoryError):
    """Uploading the featured image failed; nothing was written."""

    code = "asset_upload_failed"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Image upload failed: {reason}")


class PersistenceError(DirectoryError):
    """The backing store rejected a read or write."""

    code = "persistence_error"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Could not save: {reason}")


class NotFoundError(DirectoryError):
    """Requested record does not exist."""

    code = "not_found"

    def __init__(self, kind: str, key: object) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} {key} not found")


class InvalidTransitionError(DirectoryError):
    """Moderation transition not allowed from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid transition from {current} to {target}")
