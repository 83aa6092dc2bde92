"""Error types raised while building search queries."""

from __future__ import annotations


class InvalidSearchParameterError(ValueError):
    """Raised when a search parameter cannot be turned into a query.

    Callers at the request boundary are expected to map this onto an
    invalid-request response.
    """
