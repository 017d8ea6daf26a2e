"""
Form Input Validation

Validation here is deliberately minimal:
- A non-numeric amount means "do nothing" (no record, no error shown)
- Empty auth fields produce one of the fixed user-facing messages
- Amount sign and range are NOT checked; negative and zero are kept
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from cashmind.models.expense import CUSTOM_CATEGORY


# Fixed user-facing messages. These are the only errors the UI shows.
SIGN_IN_MISSING_FIELDS = "Please enter both username and password."
SIGN_IN_FAILED = "Authentication failed. Please check your credentials."
SIGN_UP_MISSING_FIELDS = "Please fill all fields."
SIGN_UP_FAILED_PREFIX = "Failed to sign up: "


def parse_amount(raw: Optional[str]) -> Optional[Decimal]:
    """
    Parse the amount text field.

    Returns None for anything that is not a finite number.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def resolve_category(selected: Optional[str], custom: Optional[str] = None) -> str:
    """
    Pick the category to store.

    Selecting "Custom" means the free-text field holds the category.
    """
    if selected == CUSTOM_CATEGORY:
        return (custom or "").strip()
    return (selected or "").strip()


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_sign_in(username: Optional[str], password: Optional[str]) -> Optional[str]:
    """Return the error message to show, or None if the form can be submitted."""
    if _is_blank(username) or _is_blank(password):
        return SIGN_IN_MISSING_FIELDS
    return None


def validate_sign_up(
    username: Optional[str],
    password: Optional[str],
    email: Optional[str],
) -> Optional[str]:
    """Return the error message to show, or None if the form can be submitted."""
    if _is_blank(username) or _is_blank(password) or _is_blank(email):
        return SIGN_UP_MISSING_FIELDS
    return None
