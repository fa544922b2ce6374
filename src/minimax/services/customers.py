"""Customer service."""

from __future__ import annotations

from minimax.models.resources import Customer
from minimax.services.base import ResourceService, odata_filter, quote


class CustomerService(ResourceService[Customer]):
    endpoint = "customers"
    model = Customer

    async def list(
        self,
        name: str | None = None,
        tax_number: str | None = None,
        customer_type: str | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Customer]:
        """List customers, optionally filtered.

        ``name`` matches as a substring; the other filters match exactly.
        """
        clauses = []
        if name:
            clauses.append(f"contains(Name, {quote(name)})")
        if tax_number:
            clauses.append(f"TaxNumber eq {quote(tax_number)}")
        if customer_type:
            clauses.append(f"Type eq {quote(customer_type)}")
        if is_active is not None:
            clauses.append(f"IsActive eq {str(is_active).lower()}")
        return await self._list(odata_filter(clauses), limit=limit, offset=offset)
