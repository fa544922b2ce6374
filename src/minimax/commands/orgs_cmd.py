"""CLI commands for organizations."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from minimax.client import MinimaxClient
from minimax.commands.common import run_with_client
from minimax.models.resources import Organization
from minimax.utils.errors import handle_error
from minimax.utils.output import OutputFormat, print_output, to_rows

console = Console(stderr=True)
app = typer.Typer(name="orgs", help="List and select organizations.")

ORG_COLUMNS = ["ID", "Name"]


@app.command("list")
def list_orgs(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List organizations the logged-in user can access."""

    async def _list(client: MinimaxClient) -> list[Organization]:
        return await client.organizations.list()

    try:
        orgs = run_with_client(_list)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(to_rows(orgs), output, columns=ORG_COLUMNS, title="Organizations")


@app.command()
def select(
    name: Annotated[str, typer.Argument(help="Organization name")],
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Look up an organization by name and show the ID to use with MINIMAX_ORGANIZATION_ID."""

    async def _find(client: MinimaxClient) -> Organization | None:
        return await client.organizations.find_by_name(name)

    try:
        org = run_with_client(_find)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)

    if org is None:
        console.print(f"[red]Organization not found:[/red] {name}")
        raise typer.Exit(1)

    print_output({"ID": org.resource_id, "Name": org.Name}, output, title="Organization")
    console.print(f"[dim]export MINIMAX_ORGANIZATION_ID={org.resource_id}[/dim]")
