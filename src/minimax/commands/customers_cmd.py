"""CLI commands for customers."""

from __future__ import annotations

from typing import Annotated

import typer

from minimax.client import MinimaxClient
from minimax.commands.common import OrgOption, run_with_client, scoped
from minimax.models.resources import Customer
from minimax.utils.errors import handle_error
from minimax.utils.output import OutputFormat, print_output, to_rows

app = typer.Typer(name="customers", help="Query customers of the selected organization.")

CUSTOMER_COLUMNS = ["Id", "Code", "Name", "TaxNumber", "IsActive"]


@app.command("list")
def list_customers(
    name: Annotated[str | None, typer.Option("--name", help="Name contains")] = None,
    tax_number: Annotated[str | None, typer.Option("--tax-number", help="Exact tax number")] = None,
    active: Annotated[bool | None, typer.Option("--active/--inactive", help="Filter by status")] = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", help="Maximum rows")] = None,
    org: OrgOption = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List customers."""

    async def _list(client: MinimaxClient) -> list[Customer]:
        return await scoped(client, org).customers.list(
            name=name, tax_number=tax_number, is_active=active, limit=limit
        )

    try:
        customers = run_with_client(_list)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(to_rows(customers), output, columns=CUSTOMER_COLUMNS, title="Customers")


@app.command()
def get(
    customer_id: Annotated[str, typer.Argument(help="Customer ID")],
    org: OrgOption = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.JSON,
) -> None:
    """Show one customer."""

    async def _get(client: MinimaxClient) -> Customer:
        return await scoped(client, org).customers.get(customer_id)

    try:
        customer = run_with_client(_get)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(to_rows(customer), output, title="Customer")
