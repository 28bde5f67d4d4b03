"""Domain exceptions for rolegate.

Every failure raised by a component operation belongs to one ErrorKind.
These exceptions are independent of infrastructure concerns; the
presentation layer maps the kind to an HTTP status in exception handlers.
"""

from typing import Any, ClassVar

from rolegate.domain.enums import ErrorKind


class RolegateException(Exception):
    """Base exception for all rolegate errors.

    Subclasses set ``kind`` to classify the failure. Presentation layer maps
    these to HTTP responses using kind, message, error_code and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    kind: ClassVar[ErrorKind] = ErrorKind.INFRASTRUCTURE

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body."""
        body: dict[str, Any] = {
            "error": self.error_code,
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


# ---- Unauthorized ----


class AuthenticationException(RolegateException):
    """Raised when authentication fails (missing, invalid or expired credential)."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class TokenExpiredException(AuthenticationException):
    """Raised when a token's signature is valid but its exp has passed."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)
        self.error_code = "TOKEN_EXPIRED"
        self.details = {"reason": "expired"}


class InvalidTokenException(AuthenticationException):
    """Raised when a token is malformed, badly signed, or carries bad claims."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)
        self.error_code = "TOKEN_INVALID"
        self.details = {"reason": "invalid"}


# ---- Forbidden ----


class AuthorizationException(RolegateException):
    """Raised when the credential is valid but the operation is not allowed.

    Covers missing roles/permissions, ownership failures and protected-entity
    rules (system roles, super admin, self-deletion, dependent rows).
    """

    kind = ErrorKind.FORBIDDEN

    def __init__(
        self,
        message: str = "Permission denied",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and optional context.

        Args:
            message: Human-readable message.
            details: Optional context (e.g. required permissions, dependent count).
        """
        super().__init__(message, "PERMISSION_DENIED", details)


# ---- Not found ----


class ResourceNotFoundException(RolegateException):
    """Raised when a referenced identity, role, permission or edge does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'user_role').
            resource_id: The ID that was not found.
            message: Optional message overriding the default.
        """
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


# ---- Conflict ----


class ConflictException(RolegateException):
    """Raised on uniqueness violations (duplicate name or email)."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str,
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class UserAlreadyExistsException(ConflictException):
    """Raised when creating a user whose email is already registered."""

    def __init__(self) -> None:
        """Initialize with a generic message (email duplicate)."""
        super().__init__(
            "User with this email already exists",
            "USER_ALREADY_EXISTS",
        )


class DuplicateEmailException(ConflictException):
    """Raised when updating a user to an email already registered."""

    def __init__(self) -> None:
        super().__init__("Email already in use", "DUPLICATE_EMAIL")


class DuplicateAssignmentException(ConflictException):
    """Raised when assigning a role/permission that is already assigned (unique constraint)."""

    def __init__(
        self,
        message: str,
        assignment_type: str,
        details_extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message and assignment context.

        Args:
            message: Human-readable description (e.g. 'Permission already assigned to this role').
            assignment_type: 'role_permission' or 'user_role'.
            details_extra: Optional extra keys (e.g. role_id, permission_id).
        """
        details = dict(details_extra or {})
        details["assignment_type"] = assignment_type
        super().__init__(message, "DUPLICATE_ASSIGNMENT", details)


# ---- Bad request ----


class ValidationException(RolegateException):
    """Raised when input validation fails (e.g. pattern mismatch, empty batch)."""

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class PasswordPolicyException(ValidationException):
    """Raised when a password violates one or more strength rules.

    ``details["errors"]`` lists every violated rule, not only the first.
    """

    def __init__(self, errors: list[str], field: str = "password") -> None:
        super().__init__(", ".join(errors), field=field)
        self.error_code = "PASSWORD_POLICY_VIOLATION"
        self.details["errors"] = list(errors)


class InvalidReferenceException(ValidationException):
    """Raised when a batch of ids contains entries that do not resolve."""

    def __init__(self, message: str, field: str, invalid_ids: list[str]) -> None:
        super().__init__(message, field=field)
        self.error_code = "INVALID_REFERENCE"
        self.details["invalid_ids"] = sorted(invalid_ids)


# ---- Infrastructure ----


class InfrastructureException(RolegateException):
    """Raised when the store is unreachable or fails in an unclassified way.

    Message is generic by default; the presentation layer never exposes the
    underlying cause outside debug mode.
    """

    kind = ErrorKind.INFRASTRUCTURE

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, "INFRASTRUCTURE_ERROR")


class SqlNotConfiguredException(InfrastructureException):
    """Raised when an operation requires the database but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__("This operation requires a SQL database that is not configured.")
        self.error_code = "SERVICE_UNAVAILABLE"
