"""Organizations the current user can access."""

from __future__ import annotations

from typing import Any

from minimax.http.client import HttpClient
from minimax.models.resources import ListResponse, Organization

CURRENT_USER_ORGS = "api/currentuser/orgs"


class OrganizationService:
    """Lists and looks up the organizations of the logged-in user."""

    def __init__(self, client: HttpClient) -> None:
        self._client = client

    async def list(self) -> list[Organization]:
        # Not organization scoped; the user has not necessarily picked one yet.
        response = await self._client.get(CURRENT_USER_ORGS) or {}
        page = ListResponse[dict[str, Any]].model_validate(response)
        return [Organization.model_validate(row.get("Organisation") or {}) for row in page.Rows]

    async def find_by_name(self, name: str) -> Organization | None:
        for org in await self.list():
            if org.Name == name:
                return org
        return None

    async def find_by_identifier(self, identifier: str) -> Organization | None:
        """Find an organization by its identifier (matched against the name)."""
        return await self.find_by_name(identifier)
