"""Tests for the token type map and type resolution."""

from __future__ import annotations

import json
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FhirTokenQuery.core.models import CompiledSearchParam, TypeTag
from FhirTokenQuery.query.resolver import UNKNOWN_TYPE, resolve_types
from FhirTokenQuery.schema.type_map import TokenTypeMap, load_default_type_map, load_type_map


class TestTokenTypeMap(unittest.TestCase):
    def test_lookup(self) -> None:
        type_map = TokenTypeMap.from_mapping({"Patient": {"identifier": [{"code": "Identifier"}]}})
        self.assertEqual(type_map.lookup("Patient", "identifier"), ("Identifier",))
        self.assertIsNone(type_map.lookup("Patient", "name"))
        self.assertIsNone(type_map.lookup("Observation", "identifier"))
        self.assertIn("Patient", type_map)
        self.assertEqual(type_map.paths("Patient"), ("identifier",))

    def test_source_mutation_does_not_leak(self) -> None:
        raw = {"Patient": {"gender": [{"code": "code"}]}}
        type_map = TokenTypeMap.from_mapping(raw)
        raw["Patient"]["gender"].append({"code": "Coding"})
        raw["Observation"] = {}
        self.assertEqual(type_map.lookup("Patient", "gender"), ("code",))
        self.assertNotIn("Observation", type_map)

    def test_bad_shapes(self) -> None:
        cases = [
            ["Patient"],
            {"Patient": ["identifier"]},
            {"Patient": {"identifier": {"code": "Identifier"}}},
            {"Patient": {"identifier": ["Identifier"]}},
            {"Patient": {"identifier": [{"code": 1}]}},
        ]
        for raw in cases:
            with self.subTest(raw=raw):
                with self.assertRaises(TypeError):
                    TokenTypeMap.from_mapping(raw)

    def test_from_json_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "map.json"
            path.write_text(json.dumps({"Device": {"status": [{"code": "code"}]}}), encoding="utf-8")
            type_map = load_type_map(path)
        self.assertEqual(type_map.lookup("Device", "status"), ("code",))

    def test_bundled_map(self) -> None:
        type_map = load_default_type_map()
        self.assertIs(load_type_map(None), type_map)
        self.assertEqual(type_map.lookup("Patient", "identifier"), ("Identifier",))
        self.assertEqual(type_map.lookup("Patient", "active"), ("boolean",))
        self.assertEqual(type_map.lookup("Resource", "id"), ("id",))


class TestResolveTypes(unittest.TestCase):
    def setUp(self) -> None:
        self.type_map = TokenTypeMap.from_mapping(
            {
                "Observation": {
                    "value": [
                        {"code": "Quantity"},
                        {"code": "CodeableConcept"},
                        {"code": "string"},
                        {"code": "boolean"},
                    ],
                    "referenceRange": [{"code": "Range"}],
                    "empty": [],
                },
                "Encounter": {"class": [{"code": "Coding"}, {"code": "Coding"}]},
            }
        )

    def test_flags(self) -> None:
        resolution = resolve_types(self.type_map, CompiledSearchParam(resource_type="Observation", path="value"))
        self.assertTrue(resolution.data_type_exists)
        self.assertEqual(resolution.tags, {TypeTag.CODEABLE_CONCEPT, TypeTag.STRING, TypeTag.BOOLEAN})
        self.assertTrue(resolution.has_codeable_concept_type)
        self.assertTrue(resolution.has_string_type)
        self.assertTrue(resolution.has_boolean_type)
        self.assertFalse(resolution.has_identifier_type)
        self.assertFalse(resolution.has_code_type)
        self.assertFalse(resolution.has_id_type)
        self.assertFalse(resolution.has_coding_type)
        self.assertFalse(resolution.has_contact_point_type)

    def test_duplicates_have_no_effect(self) -> None:
        resolution = resolve_types(self.type_map, CompiledSearchParam(resource_type="Encounter", path="class"))
        self.assertEqual(resolution.tags, {TypeTag.CODING})

    def test_known_without_token_types(self) -> None:
        for path in ("referenceRange", "empty"):
            with self.subTest(path=path):
                resolution = resolve_types(self.type_map, CompiledSearchParam(resource_type="Observation", path=path))
                self.assertTrue(resolution.data_type_exists)
                self.assertEqual(resolution.tags, frozenset())

    def test_unknown_resource_or_path(self) -> None:
        for compiled in (
            CompiledSearchParam(resource_type="Patient", path="value"),
            CompiledSearchParam(resource_type="Observation", path="status"),
        ):
            with self.subTest(compiled=compiled):
                resolution = resolve_types(self.type_map, compiled)
                self.assertEqual(resolution, UNKNOWN_TYPE)
                self.assertFalse(resolution.data_type_exists)


if __name__ == "__main__":
    unittest.main()
