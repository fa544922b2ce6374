"""Helpers shared by the CLI command groups."""

from __future__ import annotations

import asyncio
from typing import Annotated, Any, Awaitable, Callable, TypeVar

import typer

from minimax.client import MinimaxClient
from minimax.config import Config, get_config

T = TypeVar("T")

OrgOption = Annotated[
    str | None, typer.Option("--org", help="Organization ID (default: MINIMAX_ORGANIZATION_ID)")
]


def cli_config() -> Config:
    """The loaded config, with a file token store unless one is configured.

    Each CLI invocation is a new process, so an in-memory token would be lost.
    """
    config = get_config()
    if config.token_store.kind == "memory":
        store = config.token_store.model_copy(update={"kind": "file"})
        config = config.model_copy(update={"token_store": store})
    return config


def run_with_client(fn: Callable[[MinimaxClient], Awaitable[T]], **kwargs: Any) -> T:
    """Run ``fn(client)`` on a fresh client and close it afterwards."""

    async def runner() -> T:
        async with MinimaxClient(cli_config(), **kwargs) as client:
            return await fn(client)

    return asyncio.run(runner())


def scoped(client: MinimaxClient, org: str | None) -> MinimaxClient:
    """Select ``org`` on the client when one was given on the command line."""
    if org:
        client.set_organization_id(org)
    return client
