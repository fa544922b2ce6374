"""CLI commands for journals, journal entries and journal types."""

from __future__ import annotations

from typing import Annotated

import typer

from minimax.client import MinimaxClient
from minimax.commands.common import OrgOption, run_with_client, scoped
from minimax.models.resources import JournalEntrySummary, JournalSummary, JournalType
from minimax.utils.errors import handle_error
from minimax.utils.output import OutputFormat, print_output, to_rows

app = typer.Typer(name="journals", help="Query journals of the selected organization.")

JOURNAL_COLUMNS = ["Id", "Code", "Name", "JournalTypeName", "IsActive"]
ENTRY_COLUMNS = ["Id", "JournalName", "DocumentNumber", "DocumentDate", "TotalDebitAmount", "TotalCreditAmount"]
TYPE_COLUMNS = ["Id", "Code", "Name"]

DateFrom = Annotated[str | None, typer.Option("--from", help="From date (YYYY-MM-DD)")]
DateTo = Annotated[str | None, typer.Option("--to", help="To date (YYYY-MM-DD)")]
JournalTypeOption = Annotated[str | None, typer.Option("--type", "-t", help="Journal type code, e.g. BT")]
Limit = Annotated[int | None, typer.Option("--limit", "-n", help="Maximum rows")]
Output = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]


@app.command("list")
def list_journals(
    date_from: DateFrom = None,
    date_to: DateTo = None,
    journal_type: JournalTypeOption = None,
    status: Annotated[str | None, typer.Option("--status", help="O (open), P (posted) or A (all)")] = None,
    limit: Limit = None,
    org: OrgOption = None,
    output: Output = OutputFormat.TABLE,
) -> None:
    """List journals."""

    async def _list(client: MinimaxClient) -> list[JournalSummary]:
        return await scoped(client, org).journals.list(
            date_from=date_from, date_to=date_to, journal_type=journal_type, status=status, limit=limit
        )

    try:
        journals = run_with_client(_list)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(to_rows(journals), output, columns=JOURNAL_COLUMNS, title="Journals")


@app.command()
def entries(
    date_from: DateFrom = None,
    date_to: DateTo = None,
    journal_type: JournalTypeOption = None,
    customer_id: Annotated[str | None, typer.Option("--customer", help="Customer ID")] = None,
    account: Annotated[str | None, typer.Option("--account", help="Account code")] = None,
    limit: Limit = None,
    org: OrgOption = None,
    output: Output = OutputFormat.TABLE,
) -> None:
    """List journal entries."""

    async def _entries(client: MinimaxClient) -> list[JournalEntrySummary]:
        return await scoped(client, org).journals.list_entries(
            date_from=date_from, date_to=date_to, journal_type=journal_type,
            customer_id=customer_id, account=account, limit=limit,
        )

    try:
        rows = run_with_client(_entries)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(to_rows(rows), output, columns=ENTRY_COLUMNS, title="Journal Entries")


@app.command()
def types(
    search: Annotated[str | None, typer.Option("--search", "-s", help="Search string")] = None,
    org: OrgOption = None,
    output: Output = OutputFormat.TABLE,
) -> None:
    """List journal types."""

    async def _types(client: MinimaxClient) -> list[JournalType]:
        return await scoped(client, org).journal_types.list(search=search)

    try:
        journal_types = run_with_client(_types)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(to_rows(journal_types), output, columns=TYPE_COLUMNS, title="Journal Types")
