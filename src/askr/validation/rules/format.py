"""Format validators for email addresses, hostnames, URLs and IP addresses.

Full checks use a regular expression or a standard-library parser. Partial
checks are light heuristics that only flag input no amount of further
typing could repair.
"""

from __future__ import annotations

import ipaddress
import re
import string
from collections.abc import Iterable
from urllib.parse import urlsplit

from askr.errors import ConfigurationError
from askr.validation.base import BaseValidator
from askr.validation.priority import Priority
from askr.validation.result import PartialValidationResult, ValidationResult

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
_HOSTNAME_RE = re.compile(rf"{_LABEL}(?:\.{_LABEL})*\.?")
_ATOM = r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+"
_EMAIL_LOCAL_RE = re.compile(rf"{_ATOM}(?:\.{_ATOM})*")
_EMAIL_DOMAIN_RE = re.compile(rf"{_LABEL}(?:\.{_LABEL})+")
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")

_EMAIL_LOCAL_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+/=?^_`{|}~-.")
_HOSTNAME_CHARS = frozenset(string.ascii_letters + string.digits + "-.")
_HEX_CHARS = frozenset(string.hexdigits)

MAX_EMAIL_LENGTH = 254
MAX_LOCAL_PART_LENGTH = 64
MAX_HOSTNAME_LENGTH = 253
DEFAULT_URL_SCHEMES = ("http", "https", "ftp", "ftps")


def is_valid_hostname(value: str) -> bool:
    """Check a hostname against RFC 1123 label rules."""
    if not value or len(value.rstrip(".")) > MAX_HOSTNAME_LENGTH:
        return False
    return _HOSTNAME_RE.fullmatch(value) is not None


def _check_partial_hostname(value: str, offset: int = 0) -> PartialValidationResult:
    for i, ch in enumerate(value):
        if ch not in _HOSTNAME_CHARS:
            return PartialValidationResult.error_at(offset + i).blocking()
        if ch == "." and (i == 0 or value[i - 1] == "."):
            return PartialValidationResult.error_at(offset + i).blocking()
        if ch == "-" and (i == 0 or value[i - 1] == "."):
            return PartialValidationResult.error_at(offset + i).blocking()
    return PartialValidationResult.valid()


class EmailValidator(BaseValidator):
    """Validates an email address of the form local@domain.tld."""

    name = "email"
    default_priority = Priority.HIGH

    def validate(self, value: str) -> ValidationResult:
        if self._is_valid(value):
            return self._success()
        return self._failure("Must be a valid email address")

    @staticmethod
    def _is_valid(value: str) -> bool:
        if len(value) > MAX_EMAIL_LENGTH or value.count("@") != 1:
            return False
        local, domain = value.split("@")
        if not local or len(local) > MAX_LOCAL_PART_LENGTH:
            return False
        if _EMAIL_LOCAL_RE.fullmatch(local) is None:
            return False
        return _EMAIL_DOMAIN_RE.fullmatch(domain) is not None

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        at_pos = value.find("@")
        if at_pos == -1:
            local = value
        else:
            second = value.find("@", at_pos + 1)
            if second != -1:
                return PartialValidationResult.error_at(second).blocking().with_suggestion(
                    "Only one @ is allowed"
                )
            if at_pos == 0:
                return PartialValidationResult.error_at(0).blocking()
            local = value[:at_pos]

        for i, ch in enumerate(local):
            if ch not in _EMAIL_LOCAL_CHARS:
                return PartialValidationResult.error_at(i).blocking()

        if at_pos != -1:
            return _check_partial_hostname(value[at_pos + 1 :], offset=at_pos + 1)
        return PartialValidationResult.valid()


class HostnameValidator(BaseValidator):
    """Validates a DNS hostname (RFC 1123)."""

    name = "hostname"
    default_priority = Priority.HIGH

    def validate(self, value: str) -> ValidationResult:
        if is_valid_hostname(value):
            return self._success()
        return self._failure("Must be a valid hostname")

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        return _check_partial_hostname(value)


class UrlValidator(BaseValidator):
    """Validates an absolute URL with an allowed scheme and a host."""

    name = "url"
    default_priority = Priority.HIGH

    def __init__(
        self,
        schemes: Iterable[str] = DEFAULT_URL_SCHEMES,
        *,
        priority: Priority | None = None,
        message: str | None = None,
    ) -> None:
        normalized = tuple(s.strip().lower() for s in schemes if s.strip())
        if not normalized:
            raise ConfigurationError("URL validator needs at least one allowed scheme")
        for scheme in normalized:
            if _SCHEME_RE.fullmatch(scheme) is None:
                raise ConfigurationError(f"Invalid URL scheme: '{scheme}'")
        super().__init__(priority=priority, message=message)
        self.schemes = normalized

    def validate(self, value: str) -> ValidationResult:
        if self._is_valid(value):
            return self._success()
        return self._failure("Must be a valid URL", schemes=list(self.schemes))

    def _is_valid(self, value: str) -> bool:
        if not value or any(ch.isspace() for ch in value):
            return False
        try:
            parts = urlsplit(value)
            host = parts.hostname
            parts.port  # noqa: B018 - raises ValueError for an invalid port
        except ValueError:
            return False
        if parts.scheme.lower() not in self.schemes or not host:
            return False
        try:
            ipaddress.ip_address(host)
        except ValueError:
            return is_valid_hostname(host)
        return True

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        for i, ch in enumerate(value):
            if ch.isspace():
                return PartialValidationResult.error_at(i).blocking()

        sep = value.find("://")
        scheme = value if sep == -1 else value[:sep]
        if sep == -1 and ":" in value:
            scheme = value[: value.index(":")]
        for i, ch in enumerate(scheme):
            valid = ch.isascii() and (ch.isalpha() if i == 0 else ch.isalnum() or ch in "+.-")
            if not valid:
                return PartialValidationResult.error_at(i).blocking()

        if sep != -1 and scheme.lower() not in self.schemes:
            return PartialValidationResult.error_at(0).blocking().with_suggestion(
                f"Allowed schemes: {', '.join(self.schemes)}"
            )
        return PartialValidationResult.valid()


class Ipv4Validator(BaseValidator):
    """Validates a dotted-quad IPv4 address."""

    name = "ipv4"
    default_priority = Priority.HIGH

    def validate(self, value: str) -> ValidationResult:
        try:
            ipaddress.IPv4Address(value)
        except ValueError:
            return self._failure("Must be a valid IPv4 address")
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        group_start = 0
        groups = 1
        for i, ch in enumerate(value):
            if ch == ".":
                if i == group_start:
                    return PartialValidationResult.error_at(i).blocking()
                groups += 1
                if groups > 4:
                    return PartialValidationResult.error_at(i).blocking()
                group_start = i + 1
                continue
            if not (ch.isascii() and ch.isdigit()):
                return PartialValidationResult.error_at(i).blocking()
            group = value[group_start : i + 1]
            if len(group) > 3 or int(group) > 255:
                return PartialValidationResult.error_at(i).blocking()
        return PartialValidationResult.valid()


class Ipv6Validator(BaseValidator):
    """Validates an IPv6 address (including embedded IPv4 forms)."""

    name = "ipv6"
    default_priority = Priority.HIGH

    def validate(self, value: str) -> ValidationResult:
        try:
            ipaddress.IPv6Address(value)
        except ValueError:
            return self._failure("Must be a valid IPv6 address")
        return self._success()

    def partial_validate(self, value: str, cursor_pos: int) -> PartialValidationResult:
        for i, ch in enumerate(value):
            if ch not in _HEX_CHARS and ch not in ":.":
                return PartialValidationResult.error_at(i).blocking()

        triple = value.find(":::")
        if triple != -1:
            return PartialValidationResult.error_at(triple + 2).blocking()

        first = value.find("::")
        if first != -1:
            second = value.find("::", first + 2)
            if second != -1:
                return PartialValidationResult.error_at(second).blocking().with_suggestion(
                    "'::' may appear only once"
                )

        offset = 0
        for group in value.split(":"):
            if "." not in group and len(group) > 4:
                return PartialValidationResult.error_at(offset + 4).blocking()
            offset += len(group) + 1
        return PartialValidationResult.valid()
