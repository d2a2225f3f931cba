"""Exception hierarchy for AssetDesk.

Every error raised by the entity store and the access policy derives from
``AssetDeskException`` so the API layer can translate it in one place.

Error codes follow pattern: [CATEGORY][NUMBER]
- VAL: Input validation errors
- NF: Missing (or foreign-tenant) entities
- AUTH: Role / department membership denials
- CON: Uniqueness and counter conflicts
- SYS: Operations not available in this deployment
"""

from __future__ import annotations

from typing import Any


class AssetDeskException(Exception):
    """Base exception for all AssetDesk application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with a user-facing message and metadata.

        Args:
            message: Generic, user-facing error message
            code: Unique error code (e.g., "NF001")
            status_code: HTTP status code used by the API layer
            details: Optional additional context (never another tenant's data)
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


class ValidationError(AssetDeskException):
    """Malformed or missing input fields. Do not retry without fixing input."""

    def __init__(self, message: str = "Invalid input", errors: list[dict[str, Any]] | None = None):
        super().__init__(
            message=message,
            code="VAL001",
            status_code=422,
            details={"errors": errors} if errors else {},
        )


class NotFoundError(AssetDeskException):
    """Entity does not exist, or belongs to another tenant.

    The two cases are deliberately indistinguishable to callers.
    """

    def __init__(self, entity: str = "Resource", entity_id: int | str | None = None):
        message = f"{entity} not found"
        super().__init__(
            message=message,
            code="NF001",
            status_code=404,
            details={"entity": entity.lower(), "id": entity_id} if entity_id is not None else {"entity": entity.lower()},
        )
        self.entity = entity
        self.entity_id = entity_id


class ForbiddenError(AssetDeskException):
    """Identity resolved but lacks the required role or department membership."""

    NO_DEPARTMENT_ACCESS = "Forbidden: no department access"
    ADMIN_REQUIRED = "Forbidden: admin required"

    def __init__(self, reason: str = ADMIN_REQUIRED):
        super().__init__(message=reason, code="AUTH001", status_code=403)
        self.reason = reason


class ConflictError(AssetDeskException):
    """Uniqueness violation (asset id, email, membership) or a counter race.

    Callers may retry the operation once.
    """

    def __init__(self, message: str = "Conflicting update, please retry", field: str | None = None):
        super().__init__(
            message=message,
            code="CON001",
            status_code=409,
            details={"field": field} if field else {},
        )


class OperationUnavailableError(AssetDeskException):
    """Operation is declared but not enabled in this version."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Operation unavailable: {operation}",
            code="SYS501",
            status_code=501,
            details={"operation": operation},
        )
        self.operation = operation
