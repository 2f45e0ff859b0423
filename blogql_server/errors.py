"""
Error types for BlogQL Server.

This module defines all exception types raised by the operation façade:
- BlogQLError: Base exception
- DuplicateEmailError: Email already owned by another user
- NotFoundError: Referenced id is absent from the store
- InvalidReferenceError: Create references a missing or unpublished parent
- ValidationError: Payload value has the wrong type or is empty

Invariants:
    - All errors inherit from BlogQLError
    - Errors are raised before any mutation, so the store is untouched
    - Error codes are stable and safe to expose to clients
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class BlogQLError(Exception):
    """Base exception for all BlogQL errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "BLOGQL_ERROR"
        self.details = details or {}

    @property
    def extensions(self) -> Dict[str, Any]:
        """GraphQL error extensions; graphql-core copies them onto located errors."""
        return {"code": self.code, "details": self.details}


class DuplicateEmailError(BlogQLError):
    """Email is already used by a different user."""

    def __init__(self, email: str) -> None:
        super().__init__(
            "Email taken",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )
        self.email = email


class NotFoundError(BlogQLError):
    """Resource not found.

    Raised when:
    - User, post or comment id doesn't exist
    - Subscribing to comments of a post that is missing or unpublished
    """

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            code="NOT_FOUND",
            details={
                "resource_type": resource_type,
                "resource_id": resource_id,
            },
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidReferenceError(BlogQLError):
    """Create operation references a parent it may not use.

    Raised when:
    - Post or comment author doesn't exist
    - Comment post doesn't exist or is not published
    """

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        reason: str = "does not exist",
    ) -> None:
        super().__init__(
            f"{resource_type} {resource_id} {reason}",
            code="INVALID_REFERENCE",
            details={
                "resource_type": resource_type,
                "resource_id": resource_id,
                "reason": reason,
            },
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.reason = reason


class ValidationError(BlogQLError):
    """Payload validation failed.

    Raised when:
    - Required string field is empty
    - Field value has wrong type
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"field": field_name},
        )
        self.field_name = field_name
