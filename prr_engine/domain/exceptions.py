"""Domain-specific exceptions. Pure domain layer. No infrastructure."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when a case or intake payload violates the case schema."""


class InvalidArgumentError(DomainError):
    """Raised on caller bugs, e.g. a negative business-day count."""


class IllegalTransitionError(DomainError):
    """Raised when a case status change is not allowed by the transition table."""
