"""Tests for email, hostname, URL and IP address rules."""

from __future__ import annotations

import pytest

from askr.errors import ConfigurationError
from askr.validation.rules import (
    EmailValidator,
    HostnameValidator,
    Ipv4Validator,
    Ipv6Validator,
    UrlValidator,
)


class TestEmailValidator:
    """Tests for EmailValidator."""

    @pytest.mark.parametrize(
        "value",
        ["user@example.com", "user.name+tag@sub.example.org", "x_y@a-b.io"],
    )
    def test_accepts(self, value: str) -> None:
        assert EmailValidator().validate(value).passed

    @pytest.mark.parametrize(
        "value",
        [
            "userexample.com",
            "a@b",
            "@example.com",
            ".user@example.com",
            "user@@example.com",
            "user@-example.com",
        ],
    )
    def test_rejects(self, value: str) -> None:
        result = EmailValidator().validate(value)
        assert not result.passed
        assert result.message == "Must be a valid email address"

    def test_rejects_overlong_local_part(self) -> None:
        assert not EmailValidator().validate("a" * 65 + "@example.com").passed

    def test_partial_second_at(self) -> None:
        result = EmailValidator().partial_validate("a@b@", 4)
        assert result.first_error_pos == 3
        assert not result.can_continue
        assert result.suggestion == "Only one @ is allowed"

    def test_partial_leading_at(self) -> None:
        assert EmailValidator().partial_validate("@", 1).first_error_pos == 0

    def test_partial_bad_local_character(self) -> None:
        assert EmailValidator().partial_validate("us er", 5).first_error_pos == 2

    def test_partial_bad_domain_character(self) -> None:
        assert EmailValidator().partial_validate("user@exa_mple", 13).first_error_pos == 8

    def test_partial_incomplete_is_fine(self) -> None:
        assert not EmailValidator().partial_validate("user@exam", 9).has_error


class TestHostnameValidator:
    """Tests for HostnameValidator."""

    @pytest.mark.parametrize("value", ["example.com", "localhost", "a-b.c", "example.com."])
    def test_accepts(self, value: str) -> None:
        assert HostnameValidator().validate(value).passed

    @pytest.mark.parametrize("value", ["", "-bad.com", "bad-.com", "a..b", "a" * 64 + ".com"])
    def test_rejects(self, value: str) -> None:
        assert HostnameValidator().validate(value).message == "Must be a valid hostname"

    def test_partial(self) -> None:
        assert HostnameValidator().partial_validate("ex ample", 8).first_error_pos == 2
        assert HostnameValidator().partial_validate(".example", 8).first_error_pos == 0
        assert not HostnameValidator().partial_validate("exam", 4).has_error


class TestUrlValidator:
    """Tests for UrlValidator."""

    @pytest.mark.parametrize(
        "value",
        [
            "https://example.com/path?q=1",
            "http://127.0.0.1:8080",
            "http://[::1]/",
            "ftp://files.example.com",
            "HTTPS://Example.com",
        ],
    )
    def test_accepts(self, value: str) -> None:
        assert UrlValidator().validate(value).passed

    @pytest.mark.parametrize(
        "value",
        [
            "example.com",
            "mailto:user@example.com",
            "http://exa mple.com",
            "http://example.com:99999",
            "http://",
            "gopher://example.com",
        ],
    )
    def test_rejects(self, value: str) -> None:
        result = UrlValidator().validate(value)
        assert result.message == "Must be a valid URL"
        assert result.metadata["schemes"] == ["http", "https", "ftp", "ftps"]

    def test_custom_schemes(self) -> None:
        validator = UrlValidator(schemes=["ssh"])
        assert validator.validate("ssh://host.example.com").passed
        assert not validator.validate("https://host.example.com").passed

    def test_invalid_scheme_configuration(self) -> None:
        with pytest.raises(ConfigurationError, match="at least one"):
            UrlValidator(schemes=[])
        with pytest.raises(ConfigurationError, match="Invalid URL scheme"):
            UrlValidator(schemes=["1http"])

    def test_partial_disallowed_scheme(self) -> None:
        result = UrlValidator().partial_validate("gopher://x", 10)
        assert result.first_error_pos == 0
        assert not result.can_continue
        assert result.suggestion == "Allowed schemes: http, https, ftp, ftps"

    def test_partial(self) -> None:
        assert not UrlValidator().partial_validate("htt", 3).has_error
        assert UrlValidator().partial_validate("ht tp", 5).first_error_pos == 2
        assert UrlValidator().partial_validate("1http", 5).first_error_pos == 0


class TestIpValidators:
    """Tests for Ipv4Validator and Ipv6Validator."""

    def test_ipv4(self) -> None:
        validator = Ipv4Validator()
        assert validator.validate("192.168.1.1").passed
        assert validator.validate("256.1.1.1").message == "Must be a valid IPv4 address"
        assert not validator.validate("1.2.3").passed

    @pytest.mark.parametrize(
        ("value", "pos"),
        [("192.168.300", 10), ("1..2", 2), ("1.2.3.4.5", 7), ("1234", 3), ("1.a", 2)],
    )
    def test_ipv4_partial_errors(self, value: str, pos: int) -> None:
        result = Ipv4Validator().partial_validate(value, len(value))
        assert result.first_error_pos == pos
        assert not result.can_continue

    def test_ipv4_partial_incomplete_is_fine(self) -> None:
        assert not Ipv4Validator().partial_validate("10.0.", 5).has_error

    @pytest.mark.parametrize("value", ["::1", "2001:db8::1", "::ffff:192.0.2.1"])
    def test_ipv6_accepts(self, value: str) -> None:
        assert Ipv6Validator().validate(value).passed

    @pytest.mark.parametrize("value", ["2001:db8::1::2", "g::1", "12345::"])
    def test_ipv6_rejects(self, value: str) -> None:
        assert Ipv6Validator().validate(value).message == "Must be a valid IPv6 address"

    def test_ipv6_partial(self) -> None:
        validator = Ipv6Validator()
        double = validator.partial_validate("2001:db8::1::", 13)
        assert double.first_error_pos == 11
        assert double.suggestion == "'::' may appear only once"
        assert validator.partial_validate("12345", 5).first_error_pos == 4
        assert validator.partial_validate("fe80:::", 7).first_error_pos == 6
        assert validator.partial_validate("zz", 2).first_error_pos == 0
        assert not validator.partial_validate("fe80::", 6).has_error
