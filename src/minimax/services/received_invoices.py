"""Received (incoming) invoice service."""

from __future__ import annotations

from minimax.models.resources import ReceivedInvoice
from minimax.services.base import ResourceService, odata_filter, quote


class ReceivedInvoiceService(ResourceService[ReceivedInvoice]):
    endpoint = "receivedinvoices"
    model = ReceivedInvoice

    async def list(
        self,
        customer_id: str | int | None = None,
        status: str | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ReceivedInvoice]:
        """List received invoices.

        Dates are ISO strings (``2024-01-31``) compared against ``Date``.
        """
        clauses = []
        if customer_id is not None:
            clauses.append(f"CustomerId eq {quote(customer_id)}")
        if status:
            clauses.append(f"Status eq {quote(status)}")
        if date_from:
            clauses.append(f"Date ge {date_from}")
        if date_to:
            clauses.append(f"Date le {date_to}")
        return await self._list(odata_filter(clauses), limit=limit, offset=offset)
