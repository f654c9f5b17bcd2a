"""Domain validators. Pure validation functions."""

from prr_engine.domain.validators.case_validator import (
    validate_case,
    validate_case_create_request,
    validate_case_invariants,
    validate_non_blank,
)

__all__ = [
    "validate_case",
    "validate_case_create_request",
    "validate_case_invariants",
    "validate_non_blank",
]
