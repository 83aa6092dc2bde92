"""Parse raw FHIR token search strings.

Accepted forms:
- ``code``         any system
- ``system|code``  code within system
- ``|code``        code with no system
- ``system|``      any code within system
"""

from __future__ import annotations

from FhirTokenQuery.core.errors import InvalidSearchParameterError
from FhirTokenQuery.core.models import TokenSearchValue


def parse_token_value(raw: str) -> TokenSearchValue:
    """Parse one token search value.

    Args:
        raw: Value as it appears after ``param=`` in the search URL.

    Returns:
        Normalized token value.

    Raises:
        InvalidSearchParameterError: For a lone ``|`` or more than one ``|``.
    """
    if raw == "|":
        raise InvalidSearchParameterError(f"Invalid token search parameter: {raw}")
    parts = raw.split("|")
    if len(parts) == 1:
        return TokenSearchValue(code=raw)
    if len(parts) > 2:
        raise InvalidSearchParameterError(f"Invalid token search parameter: {raw}")

    system_part, code_part = parts
    return TokenSearchValue(
        system=system_part or None,
        code=code_part or None,
        explicit_no_system_property=system_part == "",
    )
