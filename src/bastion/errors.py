"""Bastion exception hierarchy.

Shared across the store backends, the engine, and the CLI so every module
raises and catches the same types.
"""


class BastionError(Exception):
    """Base for all bastion-specific errors."""


class ConfigurationError(BastionError):
    """Raised when a policy or settings value is invalid.

    Typically raised at construction time, before any store is touched.
    """


class ValidationError(BastionError, ValueError):
    """Raised for an empty or malformed identifier.

    Always raised before any store access, so nothing is partially applied.
    """


class StoreError(BastionError):
    """Raised when the backing store rejects or fails an operation."""


class StoreUnavailable(StoreError):  # noqa: N818
    """Raised when the backing store is unreachable or times out."""
