"""
Form validation and display formatting helpers.

Used by the CLI before payloads are sent to the API. The backend remains the
authority; these checks only catch obvious input mistakes early.
"""

import re
from datetime import date, datetime
from typing import Union

from collegehub.constants import MAX_RATING, MIN_RATING, PASSWORD_MIN_LENGTH

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-()]+$")


def validate_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_password(password: str) -> bool:
    return password is not None and len(password) >= PASSWORD_MIN_LENGTH


def validate_phone(phone: str) -> bool:
    """Accept digits, spaces, dashes, parentheses and a leading '+', with at least 10 digits."""
    if not phone or PHONE_PATTERN.match(phone) is None:
        return False
    return len(re.sub(r"\D", "", phone)) >= 10


def validate_required(value: str) -> bool:
    return value is not None and len(value.strip()) > 0


def validate_rating(rating: Union[int, float]) -> bool:
    return MIN_RATING <= rating <= MAX_RATING


def format_phone_number(phone: str) -> str:
    """
    Format a 10-digit phone number as "(XXX) XXX-XXXX".

    Any other length is returned unchanged.
    """
    cleaned = re.sub(r"\D", "", phone)
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    return phone


def format_currency(amount: Union[int, float]) -> str:
    """Format as whole US dollars, e.g. 52000 -> "$52,000"."""
    return f"${amount:,.0f}"


def format_date(value: Union[str, date, datetime]) -> str:
    """
    Format an ISO date string or date object as "Month D, YYYY".

    Args:
        value: ISO-8601 string (a trailing "Z" is accepted) or date/datetime

    Returns:
        Human-readable date, e.g. "January 5, 2025"
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.strftime('%B')} {value.day}, {value.year}"
