"""Testes da normalização de destinos."""

from __future__ import annotations

import pytest

from app.services.addressing import is_group_address, normalize_target
from utils.errors import InvalidTargetError


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("5551234567", "15551234567@s.whatsapp.net"),
        ("(555) 123-4567", "15551234567@s.whatsapp.net"),
        ("+44 7911 123456", "447911123456@s.whatsapp.net"),
        ("555-1234-5678", "55512345678@s.whatsapp.net"),
        ("15551234567@s.whatsapp.net", "15551234567@s.whatsapp.net"),
    ],
)
def test_normalize_target(target: str, expected: str) -> None:
    assert normalize_target(target, "1") == expected


def test_ten_digit_numbers_receive_configured_country_code() -> None:
    assert normalize_target("1198765432", "55") == "551198765432@s.whatsapp.net"


def test_group_address_passes_through() -> None:
    group = "120363025246125486@g.us"
    assert is_group_address(group) is True
    assert normalize_target(f" {group} ", "1") == group


@pytest.mark.parametrize("target", ["", "   ", "abc", "@s.whatsapp.net"])
def test_target_without_digits_is_rejected(target: str) -> None:
    with pytest.raises(InvalidTargetError):
        normalize_target(target, "1")


def test_invalid_target_is_also_value_error() -> None:
    with pytest.raises(ValueError):
        normalize_target("---", "1")
