"""Query builders for FHIR search parameters.

The token compiler turns a parsed token value into an Elasticsearch query
clause, choosing physical fields from the FHIR type map.
"""

from __future__ import annotations

from FhirTokenQuery.query.modifiers import SUPPORTED_MODIFIERS, check_modifier
from FhirTokenQuery.query.parser import parse_token_value
from FhirTokenQuery.query.resolver import TypeResolution, resolve_types
from FhirTokenQuery.query.token import TokenQueryCompiler, compose, token_query

__all__ = [
    "SUPPORTED_MODIFIERS",
    "TokenQueryCompiler",
    "TypeResolution",
    "check_modifier",
    "compose",
    "parse_token_value",
    "resolve_types",
    "token_query",
]
