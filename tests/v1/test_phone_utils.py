# tests/v1/test_phone_utils.py
"""Tests for phone number helpers."""

import pytest

from pulse_chat.utils.phone import default_display_name, normalize_phone


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+7 999 123 45 67", "79991234567"),
        ("+1 (555) 010-9999", "15550109999"),
        ("79991234567", "79991234567"),
        ("phone: none", ""),
    ],
)
def test_normalize_phone(raw, expected):
    """Only digits survive normalization."""
    assert normalize_phone(raw) == expected


def test_normalize_phone_is_idempotent():
    once = normalize_phone("+44 20-7946 0958")
    assert normalize_phone(once) == once


def test_default_display_name_uses_last_four_digits():
    assert default_display_name("79991234567") == "User 4567"
