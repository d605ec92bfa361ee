"""Exception types raised by the metabolics probe.

Setup failures (``ConfigurationError``, ``BindingError``) are raised before
any evaluation runs. ``ComputationError`` signals a fault during evaluation
and is never retried.
"""


class MetabolicsError(Exception):
    """Base class for all muscle metabolics errors."""


class ConfigurationError(MetabolicsError, ValueError):
    """Invalid or missing configuration value."""


class BindingError(MetabolicsError, LookupError):
    """A configured muscle name has no counterpart in the host model."""


class ComputationError(MetabolicsError, RuntimeError):
    """Non-finite input, unresolved mass or other fault during evaluation."""
