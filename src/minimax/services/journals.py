"""Journal and journal entry service."""

from __future__ import annotations

from typing import Any, Literal

from minimax.models.resources import Journal, JournalEntrySummary, JournalSummary, VATEntry
from minimax.services.base import ResourceService

JOURNAL_ENTRIES = "journal-entries"

SortOrder = Literal["A", "D"]


def _sorting(sort_field: str | None, order: SortOrder | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if sort_field:
        params["SortField"] = sort_field
    if order:
        params["Order"] = order
    return params


class JournalService(ResourceService[Journal]):
    endpoint = "journals"
    model = Journal

    async def list(
        self,
        date_from: str | None = None,
        date_to: str | None = None,
        journal_id: str | int | None = None,
        journal_type: str | None = None,
        description: str | None = None,
        status: Literal["O", "P", "A"] | None = None,
        sort_field: str | None = None,
        order: SortOrder | None = None,
        page_size: int = 100,
        limit: int | None = None,
    ) -> list[JournalSummary]:
        """Search journals.

        Args:
            date_from: First journal date, ISO format (``2025-04-29``).
            date_to: Last journal date, ISO format.
            journal_type: Journal type code, e.g. ``BT`` for bank statements.
            status: ``O`` open, ``P`` posted, ``A`` any.
            order: ``A`` ascending or ``D`` descending on ``sort_field``.
        """
        params: dict[str, Any] = {}
        if date_from:
            params["DateFrom"] = date_from
        if date_to:
            params["DateTo"] = date_to
        if journal_id is not None:
            params["JournalId"] = journal_id
        if journal_type:
            params["JournalType"] = journal_type
        if description:
            params["Description"] = description
        if status:
            params["Status"] = status
        params.update(_sorting(sort_field, order))
        return await self._search(JournalSummary, params, page_size=page_size, limit=limit)

    async def list_entries(
        self,
        journal_type: str | None = None,
        description: str | None = None,
        analytic_id: str | int | None = None,
        customer_id: str | int | None = None,
        employee_id: str | int | None = None,
        status: str | None = None,
        currency: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        account: str | None = None,
        sort_field: str | None = None,
        order: SortOrder | None = None,
        page_size: int = 100,
        limit: int | None = None,
    ) -> list[JournalEntrySummary]:
        """Search journal entries across journals."""
        params: dict[str, Any] = {}
        if journal_type:
            params["JournalType"] = journal_type
        if description:
            params["Description"] = description
        if analytic_id is not None:
            params["AnalyticID"] = analytic_id
        if customer_id is not None:
            params["CustomerID"] = customer_id
        if employee_id is not None:
            params["EmployeeId"] = employee_id
        if status:
            params["Status"] = status
        if currency:
            params["Currency"] = currency
        if date_from:
            params["DateFrom"] = date_from
        if date_to:
            params["DateTo"] = date_to
        if account:
            params["Account"] = account
        params.update(_sorting(sort_field, order))
        return await self._search(
            JournalEntrySummary, params, path=JOURNAL_ENTRIES, page_size=page_size, limit=limit
        )

    async def get_vat_entry(self, journal_id: str | int, vat_id: str | int) -> VATEntry:
        data = await self._client.get(self._endpoint(f"{journal_id}/vat/{vat_id}"))
        return VATEntry.model_validate(data)

    async def create_vat_entry(self, journal_id: str | int, entry: VATEntry | dict[str, Any]) -> None:
        await self._client.post(self._endpoint(f"{journal_id}/vat"), _body(entry))

    async def update_vat_entry(
        self,
        journal_id: str | int,
        vat_id: str | int,
        entry: VATEntry | dict[str, Any],
    ) -> None:
        """Replace a VAT entry; ``entry`` must carry the RowVersion it was read with."""
        await self._client.put(self._endpoint(f"{journal_id}/vat/{vat_id}"), _body(entry))

    async def delete_vat_entry(self, journal_id: str | int, vat_id: str | int) -> None:
        await self._client.delete(self._endpoint(f"{journal_id}/vat/{vat_id}"))


def _body(entry: VATEntry | dict[str, Any]) -> dict[str, Any]:
    if isinstance(entry, VATEntry):
        return entry.model_dump(exclude_none=True)
    return entry
