"""Compiler domain configuration: keyword sub-fields and type map source."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from FhirTokenQuery.config.common import (
    expect_bool,
    expect_optional_str,
    get_optional_value,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Store validated token compiler settings.

    Attributes:
        use_keyword_sub_fields: Query ``.keyword`` sub-fields.
        type_map_path: JSON type map to load; None for the bundled map.
        type_map_env: Environment variable that overrides ``type_map_path``.
    """

    use_keyword_sub_fields: bool
    type_map_path: Path | None
    type_map_env: str | None


def load_compiler(raw: Mapping[str, Any]) -> CompilerConfig:
    """Load compiler domain config from raw mapping.

    A non-empty value in the ``compiler.type_map_env`` environment variable
    takes precedence over ``compiler.type_map``.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed compiler configuration.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "compiler", required=True)
    type_map_env = expect_optional_str(
        get_optional_value(section, "type_map_env", None),
        "compiler.type_map_env",
    )
    type_map = expect_optional_str(get_optional_value(section, "type_map", None), "compiler.type_map")
    if type_map_env:
        type_map = os.getenv(type_map_env, "").strip() or type_map

    return CompilerConfig(
        use_keyword_sub_fields=expect_bool(
            get_required_value(section, "use_keyword_sub_fields", "compiler.use_keyword_sub_fields"),
            "compiler.use_keyword_sub_fields",
        ),
        type_map_path=Path(type_map) if type_map else None,
        type_map_env=type_map_env or None,
    )


def check_compiler(config: CompilerConfig) -> None:
    """Validate compiler domain constraints.

    Raises:
        ValueError: If the configured type map file does not exist.
    """
    if config.type_map_path is not None and not config.type_map_path.is_file():
        raise ValueError(f"compiler.type_map file not found: {config.type_map_path}")
