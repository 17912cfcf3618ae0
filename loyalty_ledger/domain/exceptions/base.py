"""Base domain exception."""

from typing import Any, Optional


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions. The optional context carries
    structured details (quantities, scores) for client-facing messages.
    """

    def __init__(
        self,
        message: str,
        code: str = "DOMAIN_ERROR",
        context: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.context = context or {}
        super().__init__(self.message)


class ValidationException(DomainException, ValueError):
    """Raised when a value object or rule is built with invalid data."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
        )
