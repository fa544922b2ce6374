"""Pagination helpers for the Minimax API.

OData lists page with ``$top`` / ``$skip``; the search endpoints page with
``CurrentPage`` / ``PageSize`` and wrap rows in a ``ListResponse``.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from minimax.models.resources import ListResponse


async def paginate(
    fetch_fn: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
    params: dict[str, Any],
    page_size: int = 100,
    results_key: str = "value",
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Page through all results by advancing ``$skip``.

    Args:
        fetch_fn: Coroutine taking query params and returning a response dict.
        params: The initial query parameters (``$filter``, ``$orderby``...).
        page_size: Rows requested per page (``$top``).
        results_key: The key in the response containing the rows
                     ("value" for OData lists, "Rows" for organization lists).
        limit: Stop after this many rows.

    Returns:
        All rows concatenated across pages.
    """
    all_results: list[dict[str, Any]] = []
    if limit is not None and limit <= 0:
        return all_results

    query = dict(params)
    skip = int(query.get("$skip", 0))

    while True:
        top = page_size if limit is None else min(page_size, limit - len(all_results))
        query["$top"] = top
        query["$skip"] = skip

        response = await fetch_fn(dict(query))
        items = (response or {}).get(results_key, [])
        all_results.extend(items)

        if len(items) < top:
            break
        if limit is not None and len(all_results) >= limit:
            break
        skip += len(items)

    return all_results


async def paginate_pages(
    fetch_fn: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
    params: dict[str, Any],
    page_size: int = 100,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Page through a search endpoint by advancing ``CurrentPage``.

    Stops on a short page, once ``TotalRows`` is reached, or at ``limit``.
    A ``CurrentPage`` already in ``params`` is used as the first page.
    """
    all_results: list[dict[str, Any]] = []
    if limit is not None and limit <= 0:
        return all_results

    query = dict(params)
    page_number = int(query.get("CurrentPage", 1))

    while True:
        query["CurrentPage"] = page_number
        query["PageSize"] = page_size

        page = ListResponse[dict[str, Any]].model_validate(await fetch_fn(dict(query)) or {})
        all_results.extend(page.Rows)

        if limit is not None and len(all_results) >= limit:
            return all_results[:limit]
        if len(page.Rows) < page_size:
            break
        if page.TotalRows is not None and page_number * page_size >= page.TotalRows:
            break
        page_number += 1

    return all_results
