"""Tests for form validators."""

import pytest

from core.exceptions import ValidationFailed
from core.utils.validators import (
    ensure_valid,
    validate_email,
    validate_full_name,
    validate_min_length,
    validate_national_id,
    validate_phone,
)


class TestEmail:
    def test_valid_email_is_normalized(self):
        is_valid, normalized = validate_email("An.Nguyen@Example.com")
        assert is_valid
        assert normalized == "an.nguyen@example.com"

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@", "@b.com"])
    def test_invalid_email(self, email):
        is_valid, error = validate_email(email)
        assert not is_valid
        assert error


class TestPhone:
    @pytest.mark.parametrize("phone", ["0901234567", "+84 901 234 567", "(028) 3822-1234"])
    def test_valid(self, phone):
        assert validate_phone(phone) == (True, None)

    @pytest.mark.parametrize("phone", ["", "12345678", "0901234567890123", "09012abc45"])
    def test_invalid(self, phone):
        is_valid, error = validate_phone(phone)
        assert not is_valid
        assert error


class TestFullName:
    @pytest.mark.parametrize("name", ["Nguyễn Văn An", "Lê Thị Hồng Nhung", "Jo"])
    def test_valid(self, name):
        assert validate_full_name(name) == (True, None)

    @pytest.mark.parametrize("name", ["A", "   ", "Agent 007", "x" * 101, "Robert'); DROP"])
    def test_invalid(self, name):
        is_valid, _ = validate_full_name(name)
        assert not is_valid


class TestNationalId:
    def test_twelve_digits(self):
        assert validate_national_id("079203001234") == (True, None)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "07920300123",
            "0792030012345",
            "07920300123a",
            "079203001234\n",
            "٠٧٩٢٠٣٠٠١٢٣٤",
            "０７９２０３００１２３４",
        ],
    )
    def test_invalid(self, value):
        is_valid, _ = validate_national_id(value)
        assert not is_valid


class TestMinLength:
    def test_length_is_measured_after_trimming(self):
        is_valid, error = validate_min_length("   short    ", 10, "Notes")
        assert not is_valid
        assert error == "Notes must have at least 10 characters"

    def test_exact_minimum_passes(self):
        assert validate_min_length("0123456789", 10, "Notes") == (True, None)

    def test_none_fails(self):
        assert validate_min_length(None, 1, "Notes")[0] is False


class TestEnsureValid:
    def test_returns_detail_on_success(self):
        assert ensure_valid("email", (True, "a@b.com")) == "a@b.com"

    def test_raises_with_field(self):
        with pytest.raises(ValidationFailed) as exc_info:
            ensure_valid("phone", (False, "bad phone"))
        assert exc_info.value.field == "phone"
        assert exc_info.value.message == "bad phone"
