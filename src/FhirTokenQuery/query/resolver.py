"""Resolve which FHIR data types a token search parameter path holds."""

from __future__ import annotations

from dataclasses import dataclass

from FhirTokenQuery.core.models import CompiledSearchParam, TypeTag
from FhirTokenQuery.schema.type_map import TokenTypeMap


@dataclass(frozen=True, slots=True)
class TypeResolution:
    """Type information for one field path.

    ``data_type_exists`` False means the map has no entry for the path (type
    unknown). True with no recognized tags means the path resolves only to
    types no token rule handles. Both cases fall back to broad field lists.
    """

    data_type_exists: bool
    tags: frozenset[TypeTag] = frozenset()

    def has(self, *tags: TypeTag) -> bool:
        """Return True if any of ``tags`` is present."""
        return any(tag in self.tags for tag in tags)

    @property
    def has_identifier_type(self) -> bool:
        return TypeTag.IDENTIFIER in self.tags

    @property
    def has_code_type(self) -> bool:
        return TypeTag.CODE in self.tags

    @property
    def has_codeable_concept_type(self) -> bool:
        return TypeTag.CODEABLE_CONCEPT in self.tags

    @property
    def has_id_type(self) -> bool:
        return TypeTag.ID in self.tags

    @property
    def has_string_type(self) -> bool:
        return TypeTag.STRING in self.tags

    @property
    def has_boolean_type(self) -> bool:
        return TypeTag.BOOLEAN in self.tags

    @property
    def has_coding_type(self) -> bool:
        return TypeTag.CODING in self.tags

    @property
    def has_contact_point_type(self) -> bool:
        return TypeTag.CONTACT_POINT in self.tags


UNKNOWN_TYPE = TypeResolution(data_type_exists=False)


def resolve_types(type_map: TokenTypeMap, compiled: CompiledSearchParam) -> TypeResolution:
    """Reduce the type map entry of a field to a set of token type tags.

    Order and duplicates in the map entry do not matter. Codes outside the
    token tag set (Quantity, Reference, uri, ...) are ignored.

    Args:
        type_map: Read-only type map.
        compiled: Target resource type and path.

    Returns:
        Resolution for the field; ``UNKNOWN_TYPE`` when the map has no entry.
    """
    codes = type_map.lookup(compiled.resource_type, compiled.path)
    if codes is None:
        return UNKNOWN_TYPE
    tags = frozenset(tag for tag in (TypeTag.from_code(code) for code in codes) if tag is not None)
    return TypeResolution(data_type_exists=True, tags=tags)
