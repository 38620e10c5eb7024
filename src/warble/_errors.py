"""Warble error hierarchy.

All warble-specific errors inherit from WarbleError for easy catching.
Errors raised by controller actions at request time are never wrapped.
"""


class WarbleError(Exception):
    """Base error for all warble operations."""


class ConfigError(WarbleError):
    """Invalid or missing configuration, or a route table that cannot be built."""


class ControllerError(WarbleError):
    """A controller file could not be imported, instantiated, or understood."""
