"""Auditum CLI — Entry point.

Usage:
    auditum modules roles
    auditum modules discover [--root PATH] [--json]
    auditum modules load <name> [--root PATH]
    auditum modules load-all [--root PATH] [--fail-fast]
"""

from __future__ import annotations

from pathlib import Path

import typer

from auditum.cli.commands import modules
from auditum.config import Settings, override_settings
from auditum.exceptions import ConfigurationError
from auditum.logging import configure_logging

app = typer.Typer(
    name="auditum",
    help="Auditum — discover, validate and initialise extension modules.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.add_typer(modules.app, name="modules")


@app.callback()
def main_callback(
    config: Path | None = typer.Option(None, "--config", help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Override logging.level."),
    log_format: str | None = typer.Option(None, "--log-format", help="console or json."),
) -> None:
    try:
        settings = Settings.load(config_file=config)
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2)

    override_settings(settings)
    configure_logging(
        level=log_level or settings.logging.level,
        format=log_format or settings.logging.format,
        log_file=settings.logging.file,
    )


if __name__ == "__main__":
    app()
