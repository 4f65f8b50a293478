"""Error types raised by the provider adapters."""

import copy
from typing import Optional


class ProviderError(Exception):
    """Base class for all provider failures."""
    pass


class TransportError(ProviderError):
    """Raised when an upstream call fails or answers with a non-200 status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ProviderError):
    """Raised when an upstream body is not the JSON we expect."""
    pass


class NoResultsError(ProviderError):
    """Raised when an upstream call succeeds but yields nothing usable.

    Callers use this to decide whether to fall back to another provider.
    """
    pass


class ProviderNotFoundError(ProviderError):
    """Raised when a named provider is not registered."""
    pass


def wrap_error(context: str, error: ProviderError) -> ProviderError:
    """Return a copy of `error` whose message is prefixed with `context`.

    The copy keeps the error's type and attributes, so callers can still
    tell transport, decode and empty-result failures apart.
    """
    wrapped = copy.copy(error)
    wrapped.args = (f"{context}: {error}",)
    return wrapped
