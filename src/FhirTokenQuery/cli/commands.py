"""Command implementations for FhirTokenQuery CLI.

Encapsulates the work behind each command, separated from CLI parameter
handling and output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from FhirTokenQuery.core.models import CompiledSearchParam, QueryFragment
from FhirTokenQuery.query.parser import parse_token_value
from FhirTokenQuery.query.resolver import resolve_types
from FhirTokenQuery.query.token import TokenQueryCompiler
from FhirTokenQuery.utils.log import log


@dataclass(slots=True)
class CompileCommand:
    """Compile one raw token search value into a query clause."""

    compiler: TokenQueryCompiler
    resource_type: str
    path: str
    raw_value: str
    modifier: str | None = None
    use_keyword_sub_fields: bool | None = None

    def execute(self) -> QueryFragment:
        """Parse and compile the value.

        Raises:
            InvalidSearchParameterError: If the value or modifier is invalid.
        """
        value = parse_token_value(self.raw_value)
        log.info(
            "Compiling token %s.%s=%s modifier=%s",
            self.resource_type,
            self.path,
            self.raw_value,
            self.modifier,
        )
        return self.compiler.compile(
            CompiledSearchParam(resource_type=self.resource_type, path=self.path),
            value,
            modifier=self.modifier,
            use_keyword_sub_fields=self.use_keyword_sub_fields,
        )


@dataclass(slots=True)
class LookupCommand:
    """Report the token type tags the type map holds for a field path."""

    compiler: TokenQueryCompiler
    resource_type: str
    path: str

    def execute(self) -> dict[str, Any]:
        compiled = CompiledSearchParam(resource_type=self.resource_type, path=self.path)
        resolution = resolve_types(self.compiler.type_map, compiled)
        return {
            "resourceType": self.resource_type,
            "path": self.path,
            "known": resolution.data_type_exists,
            "types": sorted(tag.value for tag in resolution.tags),
        }
