"""Mobile number normalization and validation."""

import re

_PHONE_PATTERN = re.compile(r"^\+?[\d\-()]+$")


def normalize_phone(raw: str) -> str:
    """Strip all whitespace; the remaining characters are kept as submitted."""
    return "".join(raw.split())


def is_valid_phone(number: str) -> bool:
    """Digits with optional leading +, hyphens and parentheses; 6 to 15 digits in total."""
    if not number or not _PHONE_PATTERN.match(number):
        return False
    digits = sum(ch.isdigit() for ch in number)
    return 6 <= digits <= 15
