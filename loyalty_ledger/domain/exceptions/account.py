"""Account-related domain exceptions."""

from .base import DomainException


class AccountNotFoundException(DomainException):
    """Raised when no loyalty account exists for a lookup key."""

    def __init__(self, lookup: str):
        super().__init__(
            message=f"Account not found: {lookup}",
            code="ACCOUNT_NOT_FOUND",
        )
        self.lookup = lookup


class AccountAlreadyExistsException(DomainException):
    """Raised when creating a second account for the same customer."""

    def __init__(self, customer_id: str):
        super().__init__(
            message=f"Account already exists for customer: {customer_id}",
            code="ACCOUNT_ALREADY_EXISTS",
        )
        self.customer_id = customer_id


class InactiveAccountException(DomainException):
    """Raised when a points operation is attempted on a non-active account."""

    def __init__(self, status: str):
        super().__init__(
            message=f"Cannot perform operations on {status} account",
            code="INACTIVE_ACCOUNT",
            context={"status": status},
        )
        self.status = status


class InsufficientPointsException(DomainException):
    """Raised when redeeming more points than are available."""

    def __init__(self, required: int, available: int):
        super().__init__(
            message=f"Insufficient points. Required: {required}, Available: {available}",
            code="INSUFFICIENT_POINTS",
            context={"required": required, "available": available},
        )
        self.required = required
        self.available = available


class InsufficientPendingPointsException(DomainException):
    """Raised when confirming more points than are pending."""

    def __init__(self, requested: int, pending: int):
        super().__init__(
            message=f"Cannot confirm more points than pending. Requested: {requested}, Pending: {pending}",
            code="INSUFFICIENT_PENDING_POINTS",
            context={"requested": requested, "pending": pending},
        )
        self.requested = requested
        self.pending = pending
