"""Form validation package."""

from cashmind.validation.forms import (
    SIGN_IN_FAILED,
    SIGN_IN_MISSING_FIELDS,
    SIGN_UP_FAILED_PREFIX,
    SIGN_UP_MISSING_FIELDS,
    parse_amount,
    resolve_category,
    validate_sign_in,
    validate_sign_up,
)

__all__ = [
    "SIGN_IN_FAILED",
    "SIGN_IN_MISSING_FIELDS",
    "SIGN_UP_FAILED_PREFIX",
    "SIGN_UP_MISSING_FIELDS",
    "parse_amount",
    "resolve_category",
    "validate_sign_in",
    "validate_sign_up",
]
