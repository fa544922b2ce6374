"""CLI commands for authentication management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from minimax.client import MinimaxClient
from minimax.commands.common import run_with_client
from minimax.models.auth import Credentials, TokenStatus
from minimax.utils.errors import handle_error
from minimax.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Log in to Minimax and manage the stored token.")


def _status_row(status: TokenStatus) -> dict[str, object]:
    return {
        "has_token": status.has_token,
        "is_expired": status.is_expired,
        "expires_at": str(status.expires_at) if status.expires_at else "N/A",
        "seconds_remaining": status.seconds_remaining or 0,
    }


@app.command()
def login(
    username: Annotated[str | None, typer.Option("--username", "-u", help="Overrides MINIMAX_USERNAME")] = None,
    password: Annotated[
        str | None, typer.Option("--password", "-p", help="Overrides MINIMAX_PASSWORD", hide_input=True)
    ] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Authenticate with username and password and store the token."""

    async def _login(client: MinimaxClient) -> dict[str, object]:
        credentials = None
        if username or password:
            credentials = Credentials(
                username=username or client.config.settings.username,
                password=password or client.config.settings.password,
                scope=client.config.settings.scope,
            )
        await client.login(credentials)
        status = await client.oauth2.get_status()
        return {
            "status": "authenticated",
            "organization_id": client.get_organization_id() or "N/A",
            "expires_at": str(status.expires_at),
            "seconds_remaining": status.seconds_remaining,
        }

    try:
        console.print("Authenticating...", style="yellow")
        result = run_with_client(_login)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(result, output, title="Authentication")


@app.command()
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the stored token's status."""

    async def _status(client: MinimaxClient) -> TokenStatus:
        return await client.oauth2.get_status()

    try:
        token_status = run_with_client(_status)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    print_output(_status_row(token_status), output, title="Token Status")


@app.command()
def logout() -> None:
    """Delete the stored token."""

    async def _logout(client: MinimaxClient) -> None:
        await client.logout()

    try:
        run_with_client(_logout)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)
    console.print("Logged out.", style="green")
