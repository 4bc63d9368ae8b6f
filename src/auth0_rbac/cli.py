"""CLI entry point for querying Auth0 role memberships."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from auth0_rbac.config import ManagementConfig
from auth0_rbac.errors import ConfigurationError, RoleManagerError
from auth0_rbac.rbac.auth0 import Auth0RoleManager

app = typer.Typer(
    name="auth0-rbac",
    help="Resolve RBAC role inheritance against an Auth0 tenant.",
    no_args_is_help=True,
)
console = Console()


def _load_config(
    config_path: Path | None,
    client_id: str | None,
    client_secret: str | None,
    tenant: str | None,
) -> ManagementConfig:
    data: dict = {}
    if config_path is not None:
        try:
            data = ManagementConfig.read_yaml(config_path)
        except ConfigurationError as e:
            console.print(f"[red]Invalid Auth0 settings: {escape(str(e))}[/red]")
            raise typer.Exit(1) from e

    # Explicit options and environment variables override the file
    overrides = {"client_id": client_id, "client_secret": client_secret, "tenant": tenant}
    data.update({k: v for k, v in overrides.items() if v})

    missing = [k for k in overrides if not data.get(k)]
    if missing:
        console.print(f"[red]Missing Auth0 settings: {', '.join(missing)}[/red]")
        raise typer.Exit(1)
    try:
        return ManagementConfig.from_dict(data)
    except (ValidationError, ConfigurationError) as e:
        console.print(f"[red]Invalid Auth0 settings: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]{escape(str(error))}[/red]")
    raise typer.Exit(1) from error


def _open_manager(config: ManagementConfig) -> Auth0RoleManager:
    return Auth0RoleManager.from_config(config)


def _manager(ctx: typer.Context) -> Auth0RoleManager:
    config = _load_config(**ctx.obj)
    try:
        return _open_manager(config)
    except RoleManagerError as e:
        _fail(e)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="YAML file with Auth0 settings"
    ),
    client_id: str | None = typer.Option(None, envvar="AUTH0_CLIENT_ID", help="Management API client ID"),
    client_secret: str | None = typer.Option(
        None, envvar="AUTH0_CLIENT_SECRET", help="Management API client secret"
    ),
    tenant: str | None = typer.Option(None, envvar="AUTH0_TENANT", help="Tenant name or domain"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log loading progress"),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    # Settings are resolved per command so --help works without credentials
    ctx.obj = {
        "config_path": config,
        "client_id": client_id,
        "client_secret": client_secret,
        "tenant": tenant,
    }


@app.command()
def roles(ctx: typer.Context, name: str = typer.Argument(help="User email")) -> None:
    """List the roles a user holds."""
    with _manager(ctx) as rm:
        try:
            result = rm.get_roles(name)
        except RoleManagerError as e:
            _fail(e)

    if not result:
        console.print(f"[dim]{escape(name)} has no roles[/dim]")
    for role in result:
        console.print(escape(role))


@app.command()
def users(ctx: typer.Context, role: str = typer.Argument(help="Role name")) -> None:
    """List the users holding a role."""
    with _manager(ctx) as rm:
        try:
            result = rm.get_users(role)
        except RoleManagerError as e:
            _fail(e)

    if not result:
        console.print(f"[dim]No users hold {escape(role)}[/dim]")
    for email in result:
        console.print(escape(email))


@app.command()
def check(
    ctx: typer.Context,
    name: str = typer.Argument(help="User email"),
    role: str = typer.Argument(help="Role name"),
) -> None:
    """Check whether a user inherits a role. Exits 1 when it does not."""
    with _manager(ctx) as rm:
        try:
            linked = rm.has_link(name, role)
        except RoleManagerError as e:
            _fail(e)

    if linked:
        console.print(f"[green]{escape(name)} has {escape(role)}[/green]")
    else:
        console.print(f"[yellow]{escape(name)} does not have {escape(role)}[/yellow]")
        raise typer.Exit(1)


@app.command()
def mapping(ctx: typer.Context) -> None:
    """Show the loaded (name, ID) snapshot for users and roles."""
    with _manager(ctx) as rm:
        for title, entries in (("Users", rm.principals), ("Roles", rm.groups)):
            table = Table(title=f"{title} ({len(entries)})")
            table.add_column("Name")
            table.add_column("Auth0 ID", style="dim")
            for name, provider_id in entries.items():
                table.add_row(escape(name), escape(provider_id))
            console.print(table)


if __name__ == "__main__":
    app()
