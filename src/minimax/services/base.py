"""Shared plumbing for organization-scoped resource services."""

from __future__ import annotations

from typing import Any, ClassVar, Generic, TypeVar

from minimax.http.client import HttpClient
from minimax.models.resources import Resource
from minimax.utils.pagination import paginate, paginate_pages

R = TypeVar("R", bound=Resource)
S = TypeVar("S", bound=Resource)


def odata_filter(clauses: list[str]) -> dict[str, Any]:
    """Join filter clauses into a ``$filter`` parameter (empty when none)."""
    clauses = [c for c in clauses if c]
    return {"$filter": " and ".join(clauses)} if clauses else {}


def quote(value: Any) -> str:
    """Quote a string literal for an OData filter."""
    return "'" + str(value).replace("'", "''") + "'"


class ResourceService(Generic[R]):
    """CRUD over ``api/orgs/{orgId}/<endpoint>`` for one entity type."""

    endpoint: ClassVar[str]
    model: ClassVar[type[Resource]]
    results_key: ClassVar[str] = "value"

    def __init__(self, client: HttpClient) -> None:
        self._client = client

    def _endpoint(self, path: str | int | None = None) -> str:
        base = f"{self.endpoint}/{path}" if path not in (None, "") else self.endpoint
        if base.startswith("api/"):
            return base

        org_id = self._client.session.get_organization_id()
        if org_id and "/orgs/" not in base:
            return f"api/orgs/{org_id}/{base}"
        return f"api/{base}"

    async def _list(
        self,
        params: dict[str, Any],
        limit: int | None = None,
        offset: int = 0,
        page_size: int = 100,
    ) -> list[R]:
        endpoint = self._endpoint()

        async def fetch(query: dict[str, Any]) -> dict[str, Any]:
            return await self._client.get(endpoint, params=query)

        if offset:
            params = {**params, "$skip": offset}
        rows = await paginate(
            fetch, params, page_size=page_size, results_key=self.results_key, limit=limit
        )
        return [self.model.model_validate(row) for row in rows]

    async def _search(
        self,
        model: type[S],
        params: dict[str, Any],
        path: str | None = None,
        page_size: int = 100,
        limit: int | None = None,
    ) -> list[S]:
        """Query a paged search endpoint (``CurrentPage`` / ``PageSize`` / ``Rows``)."""
        endpoint = self._endpoint(path)

        async def fetch(query: dict[str, Any]) -> dict[str, Any]:
            return await self._client.get(endpoint, params=query)

        rows = await paginate_pages(fetch, params, page_size=page_size, limit=limit)
        return [model.model_validate(row) for row in rows]

    async def get(self, resource_id: str | int) -> R:
        data = await self._client.get(self._endpoint(resource_id))
        return self.model.model_validate(data)

    async def create(self, data: dict[str, Any]) -> R:
        created = await self._client.post(self._endpoint(), data)
        return self.model.model_validate(created)

    async def update(
        self,
        resource_id: str | int,
        data: dict[str, Any],
        resource: R | dict[str, Any] | None = None,
    ) -> R:
        """Update an entity.

        Pass the previously fetched ``resource`` to send its RowVersion along;
        otherwise ``data`` must already carry one.
        """
        endpoint = self._endpoint(resource_id)
        if resource is not None:
            updated = await self._client.update_with_concurrency(endpoint, resource, data)
        else:
            updated = await self._client.put(endpoint, data)
        return self.model.model_validate(updated)

    async def delete(self, resource_id: str | int, row_version: str | None = None) -> None:
        params = {"RowVersion": row_version} if row_version else None
        await self._client.delete(self._endpoint(resource_id), params=params)
