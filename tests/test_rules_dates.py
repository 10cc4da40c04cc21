"""Tests for date, time and datetime rules."""

from __future__ import annotations

import pytest

from askr.errors import ConfigurationError
from askr.validation.rules import DateTimeValidator, DateValidator, TimeValidator
from askr.validation.rules.dates import DIGIT, compile_template


class TestCompileTemplate:
    """Tests for compile_template."""

    def test_fixed_width_format(self) -> None:
        template, complete = compile_template("%Y-%m")
        assert template == [DIGIT] * 4 + ["-"] + [DIGIT] * 2
        assert complete

    def test_stops_at_variable_width_directive(self) -> None:
        template, complete = compile_template("%Y %b")
        assert template == [DIGIT] * 4 + [" "]
        assert not complete

    def test_literal_percent(self) -> None:
        template, complete = compile_template("%d%%")
        assert template == [DIGIT, DIGIT, "%"]
        assert complete


class TestDateValidator:
    """Tests for DateValidator."""

    def test_default_format(self) -> None:
        validator = DateValidator()
        assert validator.format == "%Y-%m-%d"
        assert validator.validate("2024-02-29").passed

    def test_invalid_calendar_date(self) -> None:
        result = DateValidator().validate("2023-02-29")
        assert not result.passed
        assert result.message == "Must be a valid date in format: %Y-%m-%d"
        assert result.metadata["format"] == "%Y-%m-%d"

    def test_custom_format(self) -> None:
        validator = DateValidator("%d/%m/%Y")
        assert validator.validate("31/12/2024").passed
        assert not validator.validate("2024-12-31").passed

    def test_format_without_directives(self) -> None:
        with pytest.raises(ConfigurationError, match="no directives"):
            DateValidator("yyyy-mm-dd")

    def test_partial_prefix_is_fine(self) -> None:
        assert not DateValidator().partial_validate("2024-0", 6).has_error

    def test_partial_wrong_literal(self) -> None:
        result = DateValidator().partial_validate("2024/", 5)
        assert result.first_error_pos == 4
        assert not result.can_continue
        assert result.suggestion == "Expected '-'"

    def test_partial_non_digit(self) -> None:
        assert DateValidator().partial_validate("20a", 3).first_error_pos == 2

    def test_partial_too_long(self) -> None:
        result = DateValidator().partial_validate("2024-01-011", 11)
        assert result.first_error_pos == 10
        assert result.suggestion == "Expected format: %Y-%m-%d"

    def test_partial_variable_width_format_is_lenient(self) -> None:
        validator = DateValidator("%B %d")
        assert not validator.partial_validate("Janua", 5).has_error


class TestTimeAndDateTime:
    """Tests for TimeValidator and DateTimeValidator."""

    def test_time(self) -> None:
        assert TimeValidator().validate("23:59:59").passed
        result = TimeValidator().validate("24:00:00")
        assert result.message == "Must be a valid time in format: %H:%M:%S"

    def test_time_custom_format(self) -> None:
        assert TimeValidator("%H:%M").validate("08:30").passed

    def test_datetime(self) -> None:
        assert DateTimeValidator().validate("2024-01-01 12:00:00").passed
        assert not DateTimeValidator().validate("2024-01-01T12:00:00").passed
        assert DateTimeValidator().partial_validate("2024-01-01T", 11).first_error_pos == 10
