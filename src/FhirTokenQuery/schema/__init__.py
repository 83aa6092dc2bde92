"""Static FHIR schema data consulted by query builders."""

from __future__ import annotations

from FhirTokenQuery.schema.type_map import TokenTypeMap, load_default_type_map, load_type_map

__all__ = [
    "TokenTypeMap",
    "load_default_type_map",
    "load_type_map",
]
