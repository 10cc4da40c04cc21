"""Tests for building validators from specs."""

from __future__ import annotations

import pytest

from askr.errors import ConfigurationError
from askr.validation import Priority
from askr.validation.factory import (
    ValidatorRegistry,
    ValidatorSpec,
    build_engine,
    build_validator,
    get_default_registry,
)
from askr.validation.rules import (
    ChoiceValidator,
    MinLengthValidator,
    RangeValidator,
    RequiredValidator,
)


class TestValidatorRegistry:
    """Tests for ValidatorRegistry."""

    def test_register_and_build(self) -> None:
        registry = ValidatorRegistry()
        registry.register(MinLengthValidator)
        assert registry.has_kind("min_length")
        validator = registry.build(ValidatorSpec("min_length", params={"min_length": 3}))
        assert isinstance(validator, MinLengthValidator)
        assert validator.min_length == 3

    def test_register_duplicate(self) -> None:
        registry = ValidatorRegistry()
        registry.register(RequiredValidator)
        with pytest.raises(ValueError, match="already registered"):
            registry.register(RequiredValidator)

    def test_register_without_name(self) -> None:
        class Nameless(RequiredValidator):
            name = ""

        with pytest.raises(ValueError, match="has no name defined"):
            ValidatorRegistry().register(Nameless)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown validator 'nope'"):
            ValidatorRegistry().build(ValidatorSpec("nope"))

    def test_default_registry_has_every_rule(self) -> None:
        kinds = get_default_registry().list_kinds()
        for kind in (
            "required",
            "min_length",
            "max_length",
            "pattern",
            "match",
            "email",
            "hostname",
            "url",
            "ipv4",
            "ipv6",
            "integer",
            "float",
            "range",
            "positive",
            "negative",
            "date",
            "time",
            "datetime",
            "file_exists",
            "dir_exists",
            "path_exists",
            "readable",
            "writable",
            "executable",
            "choice",
        ):
            assert kind in kinds
        assert kinds == sorted(kinds)


class TestBuildValidator:
    """Tests for build_validator and build_engine."""

    def test_priority_and_message_overrides(self) -> None:
        validator = build_validator(
            ValidatorSpec("required", priority=Priority.LOW, message="Say something")
        )
        assert validator.priority is Priority.LOW
        assert validator.validate("").message == "Say something"

    def test_bad_parameter_name(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid parameters for 'min_length'"):
            build_validator(ValidatorSpec("min_length", params={"bogus": 1}))

    def test_validator_configuration_error_passes_through(self) -> None:
        with pytest.raises(ConfigurationError, match="must be non-negative"):
            build_validator(ValidatorSpec("min_length", params={"min_length": -1}))

    def test_range_and_choice_params(self) -> None:
        rng = build_validator(ValidatorSpec("range", params={"min_value": 1.0, "max_value": None}))
        assert isinstance(rng, RangeValidator)
        assert rng.validate("0").message == "Must be at least 1"

        choice = build_validator(
            ValidatorSpec("choice", params={"choices": ("a", "b"), "min_choices": 1})
        )
        assert isinstance(choice, ChoiceValidator)
        assert choice.max_choices == 2

    def test_build_engine_keeps_order(self) -> None:
        engine = build_engine(
            [
                ValidatorSpec("required"),
                ValidatorSpec("max_length", params={"max_length": 5}),
                ValidatorSpec("email"),
            ]
        )
        assert [v.name for v in engine.validators] == ["required", "max_length", "email"]

    def test_build_engine_cache_size(self) -> None:
        assert not build_engine([], cache_size=0).cache_enabled

    def test_spec_params_are_read_only(self) -> None:
        spec = ValidatorSpec("min_length", params={"min_length": 1})
        with pytest.raises(TypeError):
            spec.params["min_length"] = 2  # type: ignore[index]
