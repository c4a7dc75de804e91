"""
Input validation utilities for booking forms and API inputs.
"""

import re
from typing import Optional

from utils.datetime_utils import parse_date, parse_time_of_day


def validate_time_string(value: str) -> bool:
    """
    Validate a zero-padded 24h "HH:mm" time string.

    Args:
        value: Time string

    Returns:
        True if valid, False otherwise
    """
    try:
        parse_time_of_day(value)
    except ValueError:
        return False
    return True


def validate_date_string(value: str) -> bool:
    """Validate a "YYYY-MM-DD" date string."""
    if not value or not isinstance(value, str) or len(value.strip()) != 10:
        return False
    try:
        parse_date(value)
    except ValueError:
        return False
    return True


def validate_duration(minutes) -> bool:
    """A service duration is a positive integer count of minutes."""
    return isinstance(minutes, int) and not isinstance(minutes, bool) and minutes > 0


def parse_duration(value: str) -> int:
    """
    Convert a form duration "HH:mm" (e.g. "01:30") into minutes.

    Hours are not limited to 23, a service may last longer than a day
    on paper even if no salon would ever offer it.

    Raises:
        ValueError: If the format is invalid or the duration is zero
    """
    match = re.match(r"^(\d{1,2}):([0-5]\d)$", (value or "").strip())
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    total = int(match.group(1)) * 60 + int(match.group(2))
    if total <= 0:
        raise ValueError("Duration must be greater than 0 minutes")
    return total


def validate_email(email: str) -> bool:
    """
    Validate email address format.

    Args:
        email: Email address string

    Returns:
        True if valid format, False otherwise
    """
    if not email or not isinstance(email, str):
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate phone number format.
    Accepts international format with optional + prefix, and French
    national numbers starting with 0.
    """
    if not phone or not isinstance(phone, str):
        return False

    cleaned = re.sub(r'[\s\-\.\(\)]', '', phone)
    pattern = r'^(\+[1-9]\d{6,14}|0\d{9})$'
    return bool(re.match(pattern, cleaned))


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize free text typed in booking forms (notes, client name).

    Args:
        text: Input text
        max_length: Optional maximum length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Control characters except newlines and tabs
    sanitized = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]', '', str(text))
    sanitized = sanitized.strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
