"""Employee service."""

from __future__ import annotations

from minimax.models.resources import Employee
from minimax.services.base import ResourceService, odata_filter, quote


class EmployeeService(ResourceService[Employee]):
    endpoint = "employees"
    model = Employee
    results_key = "Rows"

    async def list(
        self,
        is_active: bool | None = None,
        employment_type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Employee]:
        clauses = []
        if is_active is not None:
            clauses.append(f"IsActive eq {str(is_active).lower()}")
        if employment_type:
            clauses.append(f"EmploymentType eq {quote(employment_type)}")
        return await self._list(odata_filter(clauses), limit=limit, offset=offset)
