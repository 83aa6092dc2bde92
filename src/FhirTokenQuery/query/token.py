"""Token search parameter compiler.

Compiles a normalized ``TokenSearchValue`` into an Elasticsearch/OpenSearch
query clause.

Clauses, in order:
- system -> lenient ``multi_match`` over the selected system fields
- code   -> lenient ``multi_match`` over the selected code fields
- ``|code`` (explicit no system) -> ``must_not exists <path>.system``

A single clause is returned as is; several are combined under ``bool.must``.
See: https://www.hl7.org/fhir/search.html#token
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from FhirTokenQuery.core.models import CompiledSearchParam, QueryFragment, TokenSearchValue
from FhirTokenQuery.query.fields import keyword_suffix, select_code_fields, select_system_fields
from FhirTokenQuery.query.modifiers import check_modifier
from FhirTokenQuery.query.resolver import resolve_types
from FhirTokenQuery.schema.type_map import TokenTypeMap, load_default_type_map
from FhirTokenQuery.utils.log import log


def multi_match_clause(fields: Sequence[str], query: str) -> QueryFragment:
    return {
        "multi_match": {
            "fields": list(fields),
            "query": query,
            "lenient": True,
        },
    }


def missing_system_clause(path: str) -> QueryFragment:
    return {
        "bool": {
            "must_not": {
                "exists": {
                    "field": f"{path}.system",
                },
            },
        },
    }


def compose(clauses: Sequence[QueryFragment]) -> QueryFragment:
    """Combine clauses with logical AND.

    Args:
        clauses: Clauses in system, code, absence order.

    Returns:
        The only clause when there is exactly one, else a ``bool.must`` over
        all of them. No clauses yields an empty ``bool.must``, which matches
        every document.
    """
    if len(clauses) == 1:
        return clauses[0]
    return {
        "bool": {
            "must": list(clauses),
        },
    }


@dataclass(frozen=True, slots=True)
class TokenQueryCompiler:
    """Compile token search values against an injected type map.

    The compiler holds no mutable state and can be shared across threads.

    Attributes:
        type_map: Read-only FHIR type map used to pick physical fields.
        use_keyword_sub_fields: Default for querying ``.keyword`` sub-fields.
    """

    type_map: TokenTypeMap
    use_keyword_sub_fields: bool = False

    def with_type_map(self, type_map: TokenTypeMap) -> TokenQueryCompiler:
        """Return a compiler bound to a new type map snapshot."""
        return replace(self, type_map=type_map)

    def compile(
        self,
        compiled: CompiledSearchParam,
        value: TokenSearchValue,
        *,
        modifier: str | None = None,
        use_keyword_sub_fields: bool | None = None,
    ) -> QueryFragment:
        """Compile one token search value.

        Args:
            compiled: Target resource type and field path.
            value: Parsed token value.
            modifier: Search modifier, if any.
            use_keyword_sub_fields: Per-call override of the compiler default.

        Returns:
            Query clause in Elasticsearch query DSL.

        Raises:
            InvalidSearchParameterError: If ``modifier`` is not supported.
        """
        check_modifier(modifier)

        use_keyword = self.use_keyword_sub_fields if use_keyword_sub_fields is None else use_keyword_sub_fields
        suffix = keyword_suffix(compiled.path, use_keyword)
        resolution = resolve_types(self.type_map, compiled)
        log.debug(
            "Token type resolution: resource=%s path=%s known=%s tags=%s",
            compiled.resource_type,
            compiled.path,
            resolution.data_type_exists,
            sorted(tag.value for tag in resolution.tags),
        )

        clauses: list[QueryFragment] = []

        if value.system is not None:
            fields = select_system_fields(compiled.path, resolution, suffix)
            log.debug("System fields for %s: %s", compiled.path, fields)
            clauses.append(multi_match_clause(fields, value.system))

        if value.code is not None:
            fields = select_code_fields(compiled.path, resolution, suffix)
            log.debug("Code fields for %s: %s", compiled.path, fields)
            clauses.append(multi_match_clause(fields, value.code))

        if value.explicit_no_system_property:
            clauses.append(missing_system_clause(compiled.path))

        if not clauses:
            log.warning(
                "Token value for %s.%s produced no clauses; query matches everything",
                compiled.resource_type,
                compiled.path,
            )
        return compose(clauses)


def token_query(
    compiled: CompiledSearchParam,
    value: TokenSearchValue,
    use_keyword_sub_fields: bool,
    modifier: str | None = None,
    *,
    type_map: TokenTypeMap | None = None,
) -> QueryFragment:
    """Compile a token search value in one call.

    Args:
        compiled: Target resource type and field path.
        value: Parsed token value.
        use_keyword_sub_fields: Whether to query ``.keyword`` sub-fields.
        modifier: Search modifier, if any.
        type_map: Type map to consult; the bundled FHIR R4 map if omitted.

    Returns:
        Query clause in Elasticsearch query DSL.

    Raises:
        InvalidSearchParameterError: If ``modifier`` is not supported.
    """
    compiler = TokenQueryCompiler(
        type_map=type_map if type_map is not None else load_default_type_map(),
        use_keyword_sub_fields=use_keyword_sub_fields,
    )
    return compiler.compile(compiled, value, modifier=modifier)
