"""Phone number normalization helpers."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """Strip every non-digit character from ``phone``.

    The result is the canonical identity key for a user and is idempotent:
    ``normalize_phone(normalize_phone(p)) == normalize_phone(p)``.
    """
    return _NON_DIGITS.sub("", phone)


def default_display_name(phone: str) -> str:
    """Return the name given to a user created from ``phone``."""
    return f"User {normalize_phone(phone)[-4:]}"
