from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class TypeTag(str, Enum):
    """FHIR R4 data types a token search parameter path can resolve to.

    Members compare equal to the raw codes stored in the type map.
    """

    IDENTIFIER = "Identifier"
    CODE = "code"
    CODEABLE_CONCEPT = "CodeableConcept"
    ID = "id"
    STRING = "string"
    BOOLEAN = "boolean"
    CODING = "Coding"
    CONTACT_POINT = "ContactPoint"

    @classmethod
    def from_code(cls, code: str) -> Optional["TypeTag"]:
        """Return the tag for a raw type code, or None when it is not a token type."""
        try:
            return cls(code)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class CompiledSearchParam:
    """Document field a search parameter targets.

    Attributes:
        resource_type: Owning FHIR resource type (e.g. "Patient").
        path: Concrete field path inside the indexed document (e.g. "identifier").
    """

    resource_type: str
    path: str


@dataclass(frozen=True, slots=True)
class TokenSearchValue:
    """Normalized token search value.

    ``None`` means the component was not given. An empty string is still a
    given component.

    Attributes:
        system: Namespace URI part of ``system|code``.
        code: Value part of ``system|code``.
        explicit_no_system_property: True for ``|code``, i.e. the document must
            not carry a system at all.
    """

    system: Optional[str] = None
    code: Optional[str] = None
    explicit_no_system_property: bool = False


QueryFragment = Dict[str, Any]
