"""Domain exceptions for the VendorFlow sharing-chain core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class VendorFlowException(Exception):
    """Base exception for all VendorFlow application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(VendorFlowException):
    """Raised when input validation fails (self-share, empty types, bad depth)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthorizationException(VendorFlowException):
    """Raised when the caller lacks the right for the operation (no grant, relay disallowed)."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'sharing_chain', 'document').
            action: Optional action that was attempted (e.g. 'relay', 'view').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action and message == "Permission denied":
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(VendorFlowException):
    """Raised when a requested resource (token, edge, permission, document) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'sharing_chain', 'document').
            resource_id: The ID that was not found. Tokens are masked by callers.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DepthExceededException(VendorFlowException):
    """Raised when a relay would push a chain past its effective max depth."""

    def __init__(self, document_id: str, requested_depth: int, max_depth: int) -> None:
        super().__init__(
            f"Relay would reach depth {requested_depth}; chain allows at most {max_depth}",
            "DEPTH_EXCEEDED",
            {
                "document_id": document_id,
                "requested_depth": requested_depth,
                "max_depth": max_depth,
            },
        )


class ShareExpiredException(VendorFlowException):
    """Raised when a share link is revoked, expired, or past its expires_at."""

    def __init__(self, chain_id: str, status: str) -> None:
        super().__init__(
            "Share link is no longer valid",
            "SHARE_EXPIRED",
            {"chain_id": chain_id, "status": status},
        )


class ConflictException(VendorFlowException):
    """Raised when a write collides with an existing record (unique constraint)."""

    def __init__(self, message: str, resource_type: str | None = None) -> None:
        details = {"resource_type": resource_type} if resource_type else {}
        super().__init__(message, "CONFLICT", details)


class StorageBackendException(VendorFlowException):
    """Raised when the remote persistence backend fails (transport or HTTP error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, "STORAGE_ERROR", details)
