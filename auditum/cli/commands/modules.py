"""CLI — Module discovery and loading commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from auditum.exceptions import AuditumError, ModuleLoadError
from auditum.modules.discovery import discover_all
from auditum.modules.loader import load_module
from auditum.modules.manifest import ManifestInfo
from auditum.modules.registry import ModuleRegistry
from auditum.modules.scanner import default_modules_root
from auditum.modules.schema import ROLE_CONTRACTS

app = typer.Typer(help="Discover, validate and load modules.")
console = Console()

_ROOT_OPTION = typer.Option(
    None, "--root", help="Modules root directory (default: AUDITUM_MODULES or ./modules)."
)


def _discover(root: Path | None) -> list[ManifestInfo]:
    try:
        return asyncio.run(discover_all(root or default_modules_root()))
    except AuditumError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1)


@app.command("roles")
def list_roles() -> None:
    """Show every module role and the capabilities it requires."""
    table = Table(title="Module Roles")
    table.add_column("Role", style="cyan")
    table.add_column("Required capabilities")

    for role, capabilities in ROLE_CONTRACTS.items():
        table.add_row(role.value, ", ".join(capabilities))
    console.print(table)


@app.command("discover")
def discover(
    root: Path | None = _ROOT_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON."),
) -> None:
    """List the modules whose manifest and entry point are valid."""
    manifests = _discover(root)

    if json_output:
        typer.echo(json.dumps([m.to_dict() for m in manifests], indent=2))
        return

    table = Table(title="Discovered Modules")
    table.add_column("Name", style="cyan")
    table.add_column("Role")
    table.add_column("Entry point")

    for m in manifests:
        table.add_row(m.name, m.role.value, str(m.entry_path))
    console.print(table)


@app.command("load")
def load(
    name: str = typer.Argument(help="Declared name of the module to load."),
    root: Path | None = _ROOT_OPTION,
) -> None:
    """Discover modules, then load and initialise the one called NAME."""
    manifests = {m.name: m for m in _discover(root)}
    manifest = manifests.get(name)
    if manifest is None:
        console.print(f"[red]Error: module '{name}' was not discovered[/red]")
        raise typer.Exit(1)

    try:
        handle = load_module(manifest)
    except ModuleLoadError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Loaded[/green] [bold]{handle.name}[/bold] ({handle.manifest.role.value})")


@app.command("load-all")
def load_all(
    root: Path | None = _ROOT_OPTION,
    fail_fast: bool = typer.Option(False, "--fail-fast", help="Stop at the first load failure."),
) -> None:
    """Discover and load every module, then print a status report."""
    registry = ModuleRegistry()
    try:
        registry.load_all(_discover(root), fail_fast=fail_fast)
    except ModuleLoadError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1)

    table = Table(title="Module Status")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Reason")

    for module_name in registry.list_available():
        table.add_row(module_name, "[green]loaded[/green]", "")
    for module_name, reason in registry.list_failed().items():
        table.add_row(module_name, "[red]failed[/red]", reason)
    console.print(table)

    if registry.list_failed():
        raise typer.Exit(1)
