"""
Typed failures raised by the booking engine and ride lifecycle.

The HTTP layer maps each class to a status code; nothing here knows
about HTTP.
"""


class DomainError(Exception):
    """Base class for every business-rule or storage failure."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Malformed or out-of-range input, e.g. a non-positive seat count."""


class NotFoundError(DomainError):
    """Ride or booking does not exist, or the ride is not bookable."""


class CapacityError(DomainError):
    """Not enough seats, including a race lost at the conditional update."""


class AuthorizationError(DomainError):
    """Actor does not own the resource they are trying to change."""


class InvalidStateTransition(DomainError):
    """Raised when a ride status change violates the state machine."""


class StorageFault(DomainError):
    """Underlying persistence operation failed; partial work was rolled back."""
