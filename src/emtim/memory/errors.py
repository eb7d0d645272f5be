"""Exceptions raised by the memory engine."""

from __future__ import annotations


class EmtimError(Exception):
    """Base class for memory engine errors."""


class ValidationError(EmtimError, ValueError):
    """Caller-supplied input was rejected before any state changed."""


class ConfigurationError(EmtimError, ValueError):
    """A configuration value is out of range or malformed."""
