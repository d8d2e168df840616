"""Tests for phone number helpers."""

import pytest

from integrations.messaging.numbers import (
    internationalize,
    normalize_digits,
    same_number,
    strip_internationalize,
)


class TestInternationalize:
    def test_adds_prefix(self) -> None:
        assert internationalize("5551234567") == "+15551234567"

    def test_keeps_existing_prefix(self) -> None:
        assert internationalize("+15551234567") == "+15551234567"

    def test_strip_removes_prefix(self) -> None:
        assert strip_internationalize("+15551234567") == "5551234567"

    def test_strip_leaves_other_numbers(self) -> None:
        assert strip_internationalize("5551234567") == "5551234567"
        assert strip_internationalize("15551234567") == "15551234567"
        assert strip_internationalize("+445551234567") == "+445551234567"

    @pytest.mark.parametrize("number", ["+15551234567", "+1", "+1 (555) 123-4567"])
    def test_prefixed_numbers_survive_strip_then_internationalize(self, number: str) -> None:
        assert internationalize(strip_internationalize(number)) == number

    @pytest.mark.parametrize("number", ["5551234567", "", "(555) 123-4567", "15551234567"])
    def test_bare_numbers_survive_internationalize_then_strip(self, number: str) -> None:
        assert strip_internationalize(internationalize(number)) == number


class TestNormalizeDigits:
    def test_formatting_is_ignored(self) -> None:
        assert normalize_digits("+1 (555) 123-4567") == "15551234567"
        assert normalize_digits("+1 (555) 123-4567") == normalize_digits("15551234567")

    def test_same_number(self) -> None:
        assert same_number("+1 (555) 123-4567", "15551234567")
        assert not same_number("+15551234567", "5551234567")
