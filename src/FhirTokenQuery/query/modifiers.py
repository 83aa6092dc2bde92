"""Search modifier validation for token parameters."""

from __future__ import annotations

from FhirTokenQuery.core.errors import InvalidSearchParameterError

# Token modifiers (:text, :not, :in, ...) that have a query translation.
SUPPORTED_MODIFIERS: frozenset[str] = frozenset()


def check_modifier(modifier: str | None) -> None:
    """Reject a modifier that has no token query translation.

    Args:
        modifier: Modifier name without the leading colon, or None.

    Raises:
        InvalidSearchParameterError: If a modifier is given and unsupported.
    """
    if modifier and modifier not in SUPPORTED_MODIFIERS:
        raise InvalidSearchParameterError(f"Unsupported token search modifier: {modifier}")
