"""Built-in validation rules."""

from __future__ import annotations

from askr.validation.rules.basic import (
    MatchValidator,
    MaxLengthValidator,
    MinLengthValidator,
    PatternValidator,
    RequiredValidator,
)
from askr.validation.rules.choice import ChoiceValidator
from askr.validation.rules.dates import DateTimeValidator, DateValidator, TimeValidator
from askr.validation.rules.filesystem import (
    DirExistsValidator,
    ExecutableValidator,
    FileExistsValidator,
    PathExistsValidator,
    ReadableValidator,
    WritableValidator,
)
from askr.validation.rules.format import (
    EmailValidator,
    HostnameValidator,
    Ipv4Validator,
    Ipv6Validator,
    UrlValidator,
)
from askr.validation.rules.numeric import (
    FloatValidator,
    IntegerValidator,
    NegativeValidator,
    PositiveValidator,
    RangeValidator,
)

__all__ = [
    # Basic
    "MatchValidator",
    "MaxLengthValidator",
    "MinLengthValidator",
    "PatternValidator",
    "RequiredValidator",
    # Numeric
    "FloatValidator",
    "IntegerValidator",
    "NegativeValidator",
    "PositiveValidator",
    "RangeValidator",
    # Format
    "EmailValidator",
    "HostnameValidator",
    "Ipv4Validator",
    "Ipv6Validator",
    "UrlValidator",
    # Date/time
    "DateTimeValidator",
    "DateValidator",
    "TimeValidator",
    # Filesystem
    "DirExistsValidator",
    "ExecutableValidator",
    "FileExistsValidator",
    "PathExistsValidator",
    "ReadableValidator",
    "WritableValidator",
    # Choice
    "ChoiceValidator",
]
