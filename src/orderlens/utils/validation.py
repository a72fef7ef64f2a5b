"""Validation of user supplied command arguments."""

import re
from datetime import date

# Local part characters allowed by RFC 5322 atoms, domain of at least two labels
_EMAIL = re.compile(r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
                    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)+$")


class InvalidInput(ValueError):
    pass


def validate_email(email: str) -> str:
    """Return the email stripped of surrounding whitespace.

    Raises:
        InvalidInput: If the value is not a plausible email address
    """
    candidate = email.strip()
    if len(candidate) < 6 or not _EMAIL.match(candidate) or '..' in candidate:
        raise InvalidInput(f"Invalid email address: {email}")
    return candidate


def parse_date(value: str | None, option: str) -> date:
    """Parse a YYYY-MM-DD command line date.

    Args:
        value: Raw option value, None if the option was not given
        option: Option name used in error messages, e.g. 'start'

    Raises:
        InvalidInput: If the value is missing or not a valid date
    """
    if value is None:
        raise InvalidInput(f"{option.capitalize()} date is required. Use --{option}=YYYY-MM-DD")

    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidInput(f"Invalid {option} date: {value}. Use YYYY-MM-DD") from None


def validate_limit(limit: int | None) -> int | None:
    if limit is not None and limit <= 0:
        raise InvalidInput(f"Limit must be a positive number, got {limit}")
    return limit
