"""Common exception types for mixthermo property models."""


class ThermoError(RuntimeError):
    """Base class for errors raised by the property evaluators."""


class ConfigurationError(ThermoError):
    """Raised when coefficient records or model tags are malformed at construction time."""


class MissingPropertyData(ConfigurationError):
    """Raised when a parameter set lacks a field required by a property model."""


class UnsupportedOperationError(ThermoError):
    """Raised when a property is requested from a mode lacking the storage it needs."""
