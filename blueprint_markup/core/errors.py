"""
Error types for the markup editing core.

DecodeError and StateInvariantViolation are recovered locally (logged, never
blocking); ValidationError and NetworkError are surfaced to the user.
"""


class MarkupError(Exception):
    """Base class for all markup errors."""


class DecodeError(MarkupError, ValueError):
    """Stored markup is not a well-formed element array."""


class ValidationError(MarkupError, ValueError):
    """A save request is missing required data (e.g. an empty name)."""


class NetworkError(MarkupError, IOError):
    """A persistence round-trip failed."""


class StateInvariantViolation(MarkupError):
    """History index fell outside [0, length)."""


class NamedSaveNotFound(MarkupError, LookupError):
    """No named save with the requested id is known."""


__all__ = [
    'MarkupError',
    'DecodeError',
    'ValidationError',
    'NetworkError',
    'StateInvariantViolation',
    'NamedSaveNotFound',
]
