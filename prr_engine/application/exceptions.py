"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class CaseNotFoundError(ApplicationError):
    """Raised when the case store has no record for a case identifier."""

    def __init__(self, case_id: str) -> None:
        self.case_id = case_id
        super().__init__(f"Case {case_id} not found")


class ConcurrencyConflictError(ApplicationError):
    """Raised when a write is based on a stale case version. Stored state is unchanged."""


class CaseIdExhaustedError(ApplicationError):
    """Raised when no unused case identifier could be generated within the retry limit."""
