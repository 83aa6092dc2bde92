from __future__ import annotations

"""Public configuration API for FhirTokenQuery."""

from FhirTokenQuery.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from FhirTokenQuery.config.compiler import CompilerConfig
from FhirTokenQuery.config.runtime import RuntimeConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AppConfig",
    "CompilerConfig",
    "RuntimeConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
