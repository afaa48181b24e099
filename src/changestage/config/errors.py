"""Errors raised while reading changestage configuration."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Configuration is present but unusable."""


class MissingConfigurationError(ConfigurationError):
    """A required setting is unset or blank."""

    def __init__(self, names: list[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class SchemaReferenceError(ConfigurationError):
    """A ``module:attribute`` schema reference cannot be loaded."""

    def __init__(self, schema_ref: str, reason: str) -> None:
        self.schema_ref = schema_ref
        super().__init__(f"Cannot load schema {schema_ref!r}: {reason}")
