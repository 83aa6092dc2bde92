"""Tests for layered config parsing and validation."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FhirTokenQuery.config import load_config, load_config_with_defaults, merge_config_dicts, parse_config_dict

CUSTOM_TYPE_MAP = REPO_ROOT / "test" / "data" / "custom_type_map.json"


def _base_raw_config() -> dict:
    return {
        "log": {"level": "INFO", "to_file": False, "dir": "log"},
        "compiler": {
            "use_keyword_sub_fields": True,
            "type_map": None,
            "type_map_env": "FHIR_TOKEN_TYPE_MAP",
        },
    }


class TestConfigLayering(unittest.TestCase):
    def setUp(self) -> None:
        patcher = patch.dict(os.environ, {}, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_parse_success_nested_access(self) -> None:
        cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertFalse(cfg.runtime.to_file)
        self.assertTrue(cfg.compiler.use_keyword_sub_fields)
        self.assertIsNone(cfg.compiler.type_map_path)
        self.assertEqual(cfg.compiler.type_map_env, "FHIR_TOKEN_TYPE_MAP")

    def test_log_level_is_normalized(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "debug"
        self.assertEqual(parse_config_dict(raw).runtime.level, "DEBUG")

    def test_log_level_unknown_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "LOUD"
        with self.assertRaisesRegex(ValueError, "log\\.level"):
            parse_config_dict(raw)

    def test_missing_compiler_section(self) -> None:
        raw = _base_raw_config()
        del raw["compiler"]
        with self.assertRaisesRegex(ValueError, "Missing required config: compiler"):
            parse_config_dict(raw)

    def test_keyword_flag_type_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["compiler"]["use_keyword_sub_fields"] = "yes"
        with self.assertRaisesRegex(TypeError, "compiler\\.use_keyword_sub_fields"):
            parse_config_dict(raw)

    def test_type_map_path(self) -> None:
        raw = _base_raw_config()
        raw["compiler"]["type_map"] = str(CUSTOM_TYPE_MAP)
        cfg = parse_config_dict(raw)
        self.assertEqual(cfg.compiler.type_map_path, CUSTOM_TYPE_MAP)

    def test_type_map_missing_file_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["compiler"]["type_map"] = str(REPO_ROOT / "test" / "data" / "missing.json")
        with self.assertRaisesRegex(ValueError, "compiler\\.type_map"):
            parse_config_dict(raw)

    def test_type_map_env_overrides_config(self) -> None:
        raw = _base_raw_config()
        raw["compiler"]["type_map"] = str(REPO_ROOT / "test" / "data" / "missing.json")
        with patch.dict(os.environ, {"FHIR_TOKEN_TYPE_MAP": str(CUSTOM_TYPE_MAP)}):
            cfg = parse_config_dict(raw)
        self.assertEqual(cfg.compiler.type_map_path, CUSTOM_TYPE_MAP)

    def test_blank_env_value_is_ignored(self) -> None:
        with patch.dict(os.environ, {"FHIR_TOKEN_TYPE_MAP": "  "}):
            cfg = parse_config_dict(_base_raw_config())
        self.assertIsNone(cfg.compiler.type_map_path)

    def test_merge_config_dicts_is_deep(self) -> None:
        merged = merge_config_dicts(_base_raw_config(), {"log": {"level": "WARNING"}})
        self.assertEqual(merged["log"], {"level": "WARNING", "to_file": False, "dir": "log"})
        self.assertEqual(merged["compiler"], _base_raw_config()["compiler"])

    def test_repo_default_config(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertTrue(cfg.compiler.use_keyword_sub_fields)
        self.assertIsNone(cfg.compiler.type_map_path)

    def test_override_file_merges_over_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "override.yml"
            override.write_text(
                "compiler:\n  use_keyword_sub_fields: false\n",
                encoding="utf-8",
            )
            cfg = load_config_with_defaults(override, default_path=REPO_ROOT / "config" / "default.yml")
        self.assertFalse(cfg.compiler.use_keyword_sub_fields)
        self.assertEqual(cfg.compiler.type_map_env, "FHIR_TOKEN_TYPE_MAP")
        self.assertEqual(cfg.runtime.level, "INFO")

    def test_non_mapping_root_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            bad = Path(tmp) / "bad.yml"
            bad.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "Config root"):
                load_config(bad)


if __name__ == "__main__":
    unittest.main()
