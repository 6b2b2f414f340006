"""Validation utilities for recruitment form data."""

import re
from typing import Optional
from email_validator import validate_email as _validate_email, EmailNotValidError

from core.exceptions import ValidationFailed

MIN_NOTES_LENGTH = 10
MIN_TITLE_LENGTH = 5
MIN_ADDRESS_LENGTH = 5

FULL_NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ỹ\s]+$")
PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")
NATIONAL_ID_PATTERN = re.compile(r"[0-9]{12}")


def validate_email(email: str) -> tuple[bool, Optional[str]]:
    """
    Validate email address format.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, lowercased normalized email or error_message)
    """
    try:
        validation = _validate_email(email, check_deliverability=False)
        return True, validation.normalized.lower()
    except EmailNotValidError as e:
        return False, str(e)


def validate_phone(phone: str) -> tuple[bool, Optional[str]]:
    """
    Validate phone number format.

    Args:
        phone: Phone number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not phone:
        return False, "Phone number is required"

    if not PHONE_PATTERN.match(phone):
        return False, "Phone number may only contain digits and + - ( ) characters"

    if len(phone) < 9:
        return False, "Phone number must have at least 9 characters"

    if len(phone) > 15:
        return False, "Phone number must not exceed 15 characters"

    return True, None


def validate_full_name(full_name: str) -> tuple[bool, Optional[str]]:
    """
    Validate a person's display name (letters, Vietnamese letters and spaces).

    Args:
        full_name: Name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    name = (full_name or "").strip()
    if len(name) < 2:
        return False, "Full name must have at least 2 characters"

    if len(name) > 100:
        return False, "Full name must not exceed 100 characters"

    if not FULL_NAME_PATTERN.match(name):
        return False, "Full name may only contain letters and spaces"

    return True, None


def validate_national_id(national_id: str) -> tuple[bool, Optional[str]]:
    """Validate a 12 digit citizen identity number."""
    if not national_id or not NATIONAL_ID_PATTERN.fullmatch(national_id):
        return False, "National ID must be exactly 12 digits"
    return True, None


def validate_min_length(value: Optional[str], minimum: int, label: str) -> tuple[bool, Optional[str]]:
    """Validate that trimmed text has at least ``minimum`` characters."""
    if len((value or "").strip()) < minimum:
        return False, f"{label} must have at least {minimum} characters"
    return True, None


def ensure_valid(field: str, result: tuple[bool, Optional[str]]) -> Optional[str]:
    """
    Raise ``ValidationFailed`` for a failed validator result.

    Args:
        field: Name of the validated field
        result: Tuple returned by one of the validators in this module

    Returns:
        The second tuple element on success (e.g. a normalized value)
    """
    is_valid, detail = result
    if not is_valid:
        raise ValidationFailed(field, detail or f"Invalid {field}")
    return detail
