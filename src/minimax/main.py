"""Minimax CLI entry point."""

from __future__ import annotations

import logging

import typer

from minimax.commands.auth_cmd import app as auth_app
from minimax.commands.customers_cmd import app as customers_app
from minimax.commands.journals_cmd import app as journals_app
from minimax.commands.orgs_cmd import app as orgs_app

app = typer.Typer(
    name="minimax",
    help="Command-line access to the Minimax accounting API.",
    no_args_is_help=True,
)

app.add_typer(auth_app, name="auth")
app.add_typer(orgs_app, name="orgs")
app.add_typer(customers_app, name="customers")
app.add_typer(journals_app, name="journals")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Minimax CLI: authenticate, pick an organization and query entities."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
