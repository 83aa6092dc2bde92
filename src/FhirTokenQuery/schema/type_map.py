"""Read-only lookup of FHIR data types behind token search parameter paths.

The map is keyed by resource type, then by field path, and lists the type
codes the path may hold::

    {"Patient": {"identifier": [{"code": "Identifier"}]}}

A loaded map is immutable. Reloading means building a new ``TokenTypeMap`` and
handing it to a new compiler, so readers never observe a half-updated map.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from FhirTokenQuery.utils.log import log

DEFAULT_TYPE_MAP_RESOURCE = "token_data_types.json"


class TokenTypeMap:
    """Immutable ``resource type -> path -> type codes`` table."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Mapping[str, tuple[str, ...]]]) -> None:
        self._entries = MappingProxyType(
            {resource_type: MappingProxyType(dict(paths)) for resource_type, paths in entries.items()}
        )

    def lookup(self, resource_type: str, path: str) -> tuple[str, ...] | None:
        """Return type codes for a field path.

        Args:
            resource_type: FHIR resource type.
            path: Field path inside the resource.

        Returns:
            Type codes in map order, or None if either key is missing.
        """
        paths = self._entries.get(resource_type)
        if paths is None:
            return None
        return paths.get(path)

    def resource_types(self) -> tuple[str, ...]:
        return tuple(self._entries.keys())

    def paths(self, resource_type: str) -> tuple[str, ...]:
        return tuple(self._entries.get(resource_type, {}).keys())

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TokenTypeMap(resource_types={len(self._entries)})"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> TokenTypeMap:
        """Validate and freeze a raw nested mapping.

        Args:
            raw: Decoded JSON/YAML map.

        Returns:
            Frozen type map.

        Raises:
            TypeError: If any level has the wrong shape.
        """
        if not isinstance(raw, Mapping):
            raise TypeError("type map root must be an object")

        entries: dict[str, dict[str, tuple[str, ...]]] = {}
        for resource_type, paths in raw.items():
            if not isinstance(resource_type, str):
                raise TypeError("type map resource types must be strings")
            if not isinstance(paths, Mapping):
                raise TypeError(f"type map entry {resource_type} must be an object")
            resource_entries: dict[str, tuple[str, ...]] = {}
            for path, data_types in paths.items():
                key = f"{resource_type}.{path}"
                if not isinstance(path, str):
                    raise TypeError(f"type map paths of {resource_type} must be strings")
                resource_entries[path] = _parse_data_types(data_types, key)
            entries[resource_type] = resource_entries
        return cls(entries)

    @classmethod
    def from_json_file(cls, path: Path) -> TokenTypeMap:
        """Load a type map from a JSON file."""
        type_map = cls.from_mapping(json.loads(path.read_text(encoding="utf-8")))
        log.debug("Loaded token type map from %s (%d resource types)", path, len(type_map))
        return type_map


def _parse_data_types(value: Any, key: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise TypeError(f"type map entry {key} must be a list")
    codes: list[str] = []
    for idx, item in enumerate(value):
        if not isinstance(item, Mapping) or not isinstance(item.get("code"), str):
            raise TypeError(f"type map entry {key}[{idx}] must be an object with a string code")
        codes.append(item["code"])
    return tuple(codes)


@lru_cache(maxsize=1)
def load_default_type_map() -> TokenTypeMap:
    """Load the FHIR R4 type map bundled with the package."""
    text = resources.files("FhirTokenQuery.schema").joinpath(DEFAULT_TYPE_MAP_RESOURCE).read_text(encoding="utf-8")
    type_map = TokenTypeMap.from_mapping(json.loads(text))
    log.debug("Loaded bundled token type map (%d resource types)", len(type_map))
    return type_map


def load_type_map(path: Path | None = None) -> TokenTypeMap:
    """Load a type map from ``path``, or the bundled map when no path is given."""
    if path is None:
        return load_default_type_map()
    return TokenTypeMap.from_json_file(path)
