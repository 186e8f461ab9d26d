"""
Unit tests for the field validators.
"""

import pytest

from onboarding_core.constants import FieldCheckError, Messages
from onboarding_core.validation import (
    check_name,
    check_username,
    is_blank,
    is_valid_name,
    is_valid_username,
)


class TestIsValidName:
    """Letters and spaces only."""

    @pytest.mark.parametrize("value", ["", "Ab cd", "Onboarding", "   ", "A B C"])
    def test_letters_and_spaces_accepted(self, value):
        assert is_valid_name(value) is True

    @pytest.mark.parametrize("value", ["Ab3", "a-b", "name_1", "tab\there", "Café", "end\n"])
    def test_other_characters_rejected(self, value):
        assert is_valid_name(value) is False


class TestIsValidUsername:
    """Letters only."""

    @pytest.mark.parametrize("value", ["", "admin", "JohnDoe"])
    def test_letters_accepted(self, value):
        assert is_valid_username(value) is True

    @pytest.mark.parametrize("value", ["john doe", "admin1", "a.b", "ü"])
    def test_other_characters_rejected(self, value):
        assert is_valid_username(value) is False


class TestCheckName:
    def test_empty(self):
        result = check_name("")
        assert result.ok is False
        assert result.error == FieldCheckError.EMPTY
        assert result.message == Messages.NAME_EMPTY

    def test_valid(self):
        result = check_name("Ab cd")
        assert result.ok is True
        assert result.error is None

    def test_invalid_format(self):
        result = check_name("Ab3")
        assert result.ok is False
        assert result.error == FieldCheckError.INVALID_FORMAT
        assert result.message == Messages.NAME_INVALID

    def test_whitespace_only_is_not_empty(self):
        assert check_name(" ").ok is True


class TestCheckUsername:
    def test_empty(self):
        result = check_username("")
        assert result.error == FieldCheckError.EMPTY
        assert result.message == Messages.USERNAME_EMPTY

    def test_valid(self):
        assert check_username("admin").ok is True

    def test_space_is_invalid(self):
        result = check_username("ad min")
        assert result.error == FieldCheckError.INVALID_FORMAT
        assert result.message == Messages.USERNAME_INVALID


class TestIsBlank:
    @pytest.mark.parametrize("value", [None, "", "  ", "\t\n"])
    def test_blank(self, value):
        assert is_blank(value) is True

    def test_not_blank(self):
        assert is_blank(" x ") is False
