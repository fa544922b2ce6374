"""Journal type lookup service."""

from __future__ import annotations

from typing import Any, Literal

from minimax.models.resources import JournalType
from minimax.services.base import ResourceService


class JournalTypeService(ResourceService[JournalType]):
    endpoint = "journaltypes"
    model = JournalType

    async def list(
        self,
        search: str | None = None,
        sort_field: str | None = None,
        order: Literal["A", "D"] | None = None,
        page_size: int = 100,
        limit: int | None = None,
    ) -> list[JournalType]:
        params: dict[str, Any] = {}
        if search:
            params["SearchString"] = search
        if sort_field:
            params["SortField"] = sort_field
        if order:
            params["Order"] = order
        return await self._search(JournalType, params, page_size=page_size, limit=limit)

    async def get_by_code(self, code: str) -> JournalType:
        data = await self._client.get(self._endpoint(f"code({code})"))
        return JournalType.model_validate(data)
