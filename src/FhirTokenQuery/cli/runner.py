"""Command runner for coordinating CLI execution.

Manages logging configuration, component creation and error handling for
command execution.
"""

from __future__ import annotations

from typing import Any

import click

from FhirTokenQuery.cli.commands import CompileCommand, LookupCommand
from FhirTokenQuery.config import AppConfig
from FhirTokenQuery.core.errors import InvalidSearchParameterError
from FhirTokenQuery.query.token import TokenQueryCompiler
from FhirTokenQuery.schema.type_map import load_type_map
from FhirTokenQuery.utils.log import configure_logging, log


def create_compiler(config: AppConfig) -> TokenQueryCompiler:
    """Create a token compiler with the configured type map.

    Args:
        config: Application configuration.

    Returns:
        Compiler bound to the loaded type map snapshot.
    """
    type_map = load_type_map(config.compiler.type_map_path)
    if config.compiler.type_map_path is not None:
        log.info("Using token type map: %s", config.compiler.type_map_path)
    return TokenQueryCompiler(
        type_map=type_map,
        use_keyword_sub_fields=config.compiler.use_keyword_sub_fields,
    )


class CommandRunner:
    """Orchestrates command execution.

    Handles logging configuration, compiler creation, and error handling for
    CLI commands.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_compile(
        self,
        action: str,
        *,
        resource_type: str,
        path: str,
        raw_value: str,
        modifier: str | None,
        use_keyword_sub_fields: bool | None,
    ) -> dict[str, Any]:
        """Compile a token value and return the query clause.

        Raises:
            click.Abort: When compilation fails.
        """
        self._configure_logging(action)
        try:
            command = CompileCommand(
                compiler=create_compiler(self.config),
                resource_type=resource_type,
                path=path,
                raw_value=raw_value,
                modifier=modifier,
                use_keyword_sub_fields=use_keyword_sub_fields,
            )
            return command.execute()
        except InvalidSearchParameterError as e:
            log.error("Invalid search parameter: %s", e)
            raise click.Abort from e
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Compile failed: %s", e)
            raise click.Abort from e

    def run_lookup(self, action: str, *, resource_type: str, path: str) -> dict[str, Any]:
        """Resolve the type tags of a field path.

        Raises:
            click.Abort: When the type map cannot be loaded.
        """
        self._configure_logging(action)
        try:
            command = LookupCommand(
                compiler=create_compiler(self.config),
                resource_type=resource_type,
                path=path,
            )
            return command.execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Lookup failed: %s", e)
            raise click.Abort from e

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
