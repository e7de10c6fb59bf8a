"""
Input validation for signup and resend requests.

Pure functions, no I/O. Checks run in a fixed order and the first
failure wins, so a given input always maps to the same error code.
"""

import re
import string

from .exceptions import ErrorCode

# Conservative address pattern: local part, @, dotted domain, 2-6 letter TLD.
EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,6}")

# Characters that survive percent-encoding unchanged (encodeURIComponent set).
URL_SAFE_CHARACTERS = frozenset(string.ascii_letters + string.digits + "-_.!~*'()")


def is_valid_email(email: str | None) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def is_url_safe(name: str) -> bool:
    """True when percent-encoding would leave the name unchanged."""
    return all(char in URL_SAFE_CHARACTERS for char in name)


def validate_signup(
    name: str | None,
    email: str | None,
    password: str | None,
    account_type: str | None,
) -> ErrorCode | None:
    """
    Validate raw signup fields.

    Check order:
    1. name, email and password present and non-empty
    2. name needs no percent-escaping
    3. name is lowercase
    4. name starts with an ASCII letter
    5. email matches EMAIL_PATTERN
    6. account type present

    Returns:
        ErrorCode of the first failing check, or None if all pass
    """
    if not name or not email or not password:
        return ErrorCode.MISSING_FIELDS
    if not is_url_safe(name):
        return ErrorCode.NAME_NOT_URL_SAFE
    if name != name.lower():
        return ErrorCode.NAME_NOT_LOWERCASE
    if name[0] not in string.ascii_lowercase:
        return ErrorCode.NAME_NOT_LETTER_FIRST
    if not is_valid_email(email):
        return ErrorCode.INVALID_EMAIL
    if not account_type:
        return ErrorCode.MISSING_ACCOUNT_TYPE
    return None


def validate_resend(email: str | None) -> ErrorCode | None:
    """Validate the email of a resend request (presence and pattern)."""
    if not is_valid_email(email):
        return ErrorCode.INVALID_RESEND_EMAIL
    return None
