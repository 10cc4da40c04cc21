"""Build validators and engines from declarative specifications.

The CLI (or any other front end) describes the rules it wants as
``ValidatorSpec`` values; the registry maps each spec's ``kind`` to a
validator class and instantiates it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from askr.errors import ConfigurationError
from askr.validation.base import BaseValidator
from askr.validation.engine import DEFAULT_CACHE_SIZE, ValidationEngine
from askr.validation.priority import Priority


@dataclass(frozen=True)
class ValidatorSpec:
    """Declarative description of one validator.

    Attributes:
        kind: Rule name (e.g. "min_length", "email").
        priority: Optional priority override.
        message: Optional custom failure message.
        params: Constructor parameters for the rule.
    """

    kind: str
    priority: Priority | None = None
    message: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


class ValidatorRegistry:
    """Registry that maps rule names to validator classes.

    Example:
        >>> registry = ValidatorRegistry()
        >>> registry.register(MinLengthValidator)
        >>> registry.build(ValidatorSpec("min_length", params={"min_length": 3}))
        MinLengthValidator(...)
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._validators: dict[str, type[BaseValidator]] = {}

    def register(self, validator_class: type[BaseValidator]) -> None:
        """Register a validator class under its rule name.

        Args:
            validator_class: A BaseValidator subclass to register.

        Raises:
            ValueError: If the class has no name or the name is taken.
        """
        kind = validator_class.name
        if not kind:
            raise ValueError(
                f"Validator class {validator_class.__name__} has no name defined"
            )
        if kind in self._validators:
            raise ValueError(
                f"Validator for kind '{kind}' already registered: "
                f"{self._validators[kind].__name__}"
            )
        self._validators[kind] = validator_class

    def has_kind(self, kind: str) -> bool:
        return kind in self._validators

    def list_kinds(self) -> list[str]:
        """List all registered rule names, sorted."""
        return sorted(self._validators)

    def build(self, spec: ValidatorSpec) -> BaseValidator:
        """Instantiate the validator described by ``spec``.

        Args:
            spec: The validator description.

        Returns:
            A configured validator.

        Raises:
            ConfigurationError: If the kind is unknown or the parameters are
                rejected by the validator.
        """
        validator_class = self._validators.get(spec.kind)
        if validator_class is None:
            raise ConfigurationError(
                f"Unknown validator '{spec.kind}'. "
                f"Valid validators: {', '.join(self.list_kinds())}"
            )
        try:
            return validator_class(
                **spec.params, priority=spec.priority, message=spec.message
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid parameters for '{spec.kind}': {e}") from e


# Global registry instance, populated on first use
_default_registry: ValidatorRegistry | None = None


def get_default_registry() -> ValidatorRegistry:
    """Get the registry holding every built-in rule."""
    global _default_registry
    if _default_registry is None:
        _default_registry = _create_default_registry()
    return _default_registry


def _create_default_registry() -> ValidatorRegistry:
    from askr.validation import rules

    registry = ValidatorRegistry()
    for export in rules.__all__:
        registry.register(getattr(rules, export))
    return registry


def build_validator(spec: ValidatorSpec) -> BaseValidator:
    """Instantiate one validator from the default registry."""
    return get_default_registry().build(spec)


def build_engine(
    specs: Iterable[ValidatorSpec],
    cache_size: int | None = DEFAULT_CACHE_SIZE,
) -> ValidationEngine:
    """Build an engine holding the validators described by ``specs``, in order.

    Raises:
        ConfigurationError: If any spec is invalid.
    """
    return ValidationEngine((build_validator(spec) for spec in specs), cache_size=cache_size)
