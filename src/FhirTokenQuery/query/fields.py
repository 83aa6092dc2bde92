"""Physical field selection for token search parameters.

A token parameter binds ``system`` and ``code`` to a path, but the value at
that path is indexed in different shapes depending on its FHIR data type:

- Coding           -> <path>.system / <path>.code
- Identifier       -> <path>.system / <path>.value
- ContactPoint     -> <path>.value
- CodeableConcept  -> <path>.coding.system / <path>.coding.code
- code/string/id/boolean -> <path> itself

Selection is an ordered rule table per component. Every rule whose tags
intersect the resolved types contributes its fields. When no rule contributes
(type unknown, or known but unhandled), the fallback list searches every
plausible field instead of none.

Keyword sub-fields: when enabled, exact-match ``.keyword`` sub-fields are
queried, except for paths listed in ``FIELDS_WITHOUT_KEYWORD``. Booleans have
no ``.keyword`` sub-field, so the bare path is queried next to it.

Known limitations, inherited from the FHIR R4 type map:
- base type inheritance is not resolved
- ``where``/``as`` clauses in search parameter expressions are ignored
- extensions and profiles are not supported
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from FhirTokenQuery.core.models import TypeTag
from FhirTokenQuery.query.resolver import TypeResolution

KEYWORD_SUFFIX = ".keyword"

# Fields indexed without a `.keyword` sub-field.
FIELDS_WITHOUT_KEYWORD: frozenset[str] = frozenset({"id"})


@dataclass(frozen=True, slots=True)
class FieldRule:
    """One row of a field selection table.

    Attributes:
        tags: Type tags that activate the rule (any of them).
        templates: Field name templates with ``{path}`` and ``{suffix}``.
        unsuffixed_for: Tags whose values have no keyword sub-field; when one
            is present and a suffix is in use, the bare path is added first.
    """

    tags: frozenset[TypeTag]
    templates: tuple[str, ...]
    unsuffixed_for: frozenset[TypeTag] = frozenset()

    def fields(self, path: str, resolution: TypeResolution, suffix: str) -> list[str]:
        if not resolution.has(*self.tags):
            return []
        out: list[str] = []
        if suffix and resolution.has(*self.unsuffixed_for):
            out.append(path)
        out.extend(_expand(self.templates, path, suffix))
        return out


SYSTEM_RULES: tuple[FieldRule, ...] = (
    FieldRule(tags=frozenset({TypeTag.IDENTIFIER, TypeTag.CODING}), templates=("{path}.system{suffix}",)),
    FieldRule(tags=frozenset({TypeTag.CODEABLE_CONCEPT}), templates=("{path}.coding.system{suffix}",)),
)

SYSTEM_FALLBACK: tuple[str, ...] = (
    "{path}.system{suffix}",
    "{path}.coding.system{suffix}",
)

CODE_RULES: tuple[FieldRule, ...] = (
    FieldRule(tags=frozenset({TypeTag.CODING}), templates=("{path}.code{suffix}",)),
    FieldRule(tags=frozenset({TypeTag.CODEABLE_CONCEPT}), templates=("{path}.coding.code{suffix}",)),
    FieldRule(tags=frozenset({TypeTag.IDENTIFIER, TypeTag.CONTACT_POINT}), templates=("{path}.value{suffix}",)),
    FieldRule(
        tags=frozenset({TypeTag.CODE, TypeTag.STRING, TypeTag.BOOLEAN, TypeTag.ID}),
        templates=("{path}{suffix}",),
        unsuffixed_for=frozenset({TypeTag.BOOLEAN}),
    ),
)

CODE_FALLBACK: tuple[str, ...] = (
    "{path}.code{suffix}",
    "{path}.coding.code{suffix}",
    "{path}.value{suffix}",
    "{path}{suffix}",
)


def keyword_suffix(path: str, use_keyword_sub_fields: bool) -> str:
    """Return the field name suffix to apply to leaf fields under ``path``."""
    if use_keyword_sub_fields and path not in FIELDS_WITHOUT_KEYWORD:
        return KEYWORD_SUFFIX
    return ""


def select_system_fields(path: str, resolution: TypeResolution, suffix: str) -> list[str]:
    """Return the fields to match a token ``system`` against.

    Args:
        path: Field path of the search parameter.
        resolution: Resolved types of the path.
        suffix: Keyword suffix from ``keyword_suffix``.

    Returns:
        Ordered field names.
    """
    return _select(SYSTEM_RULES, SYSTEM_FALLBACK, path, resolution, suffix)


def select_code_fields(path: str, resolution: TypeResolution, suffix: str) -> list[str]:
    """Return the fields to match a token ``code`` against.

    When the type is unknown a boolean cannot be ruled out, so the bare path is
    added after the fallback fields whenever a suffix is in use.

    Args:
        path: Field path of the search parameter.
        resolution: Resolved types of the path.
        suffix: Keyword suffix from ``keyword_suffix``.

    Returns:
        Ordered field names.
    """
    fields = _select(CODE_RULES, CODE_FALLBACK, path, resolution, suffix)
    if not resolution.data_type_exists and suffix:
        fields.append(path)
    return fields


def _select(
    rules: Iterable[FieldRule],
    fallback: tuple[str, ...],
    path: str,
    resolution: TypeResolution,
    suffix: str,
) -> list[str]:
    fields: list[str] = []
    if resolution.data_type_exists:
        for rule in rules:
            fields.extend(rule.fields(path, resolution, suffix))
    if not fields:
        fields = _expand(fallback, path, suffix)
    return fields


def _expand(templates: Iterable[str], path: str, suffix: str) -> list[str]:
    return [template.format(path=path, suffix=suffix) for template in templates]
