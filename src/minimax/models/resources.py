"""Resource models returned by the Minimax API.

The API uses PascalCase field names; models keep them as-is and allow extra
fields so that payloads round-trip without loss.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Resource(BaseModel):
    """Base for every API entity carrying an optimistic-concurrency token."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    Id: str | int | None = None
    RowVersion: str | None = None

    @property
    def resource_id(self) -> str | int | None:
        """``Id`` or, for entities that spell it ``ID``, that field."""
        return self.Id or getattr(self, "ID", None)


class Organization(Resource):
    Name: str = ""
    TaxNumber: str | None = None
    RegistrationNumber: str | None = None
    IsActive: bool | None = None


class Customer(Resource):
    Name: str = ""
    Code: str | None = None
    TaxNumber: str | None = None
    RegistrationNumber: str | None = None
    Type: str | None = None
    IsActive: bool | None = None
    Email: str | None = None
    Phone: str | None = None
    Address: dict[str, Any] | None = None


class Employee(Resource):
    FirstName: str = ""
    LastName: str = ""
    TaxNumber: str | None = None
    EmploymentType: str | None = None
    IsActive: bool | None = None


class ReceivedInvoice(Resource):
    Number: str | None = None
    Date: str | None = None
    DueDate: str | None = None
    CustomerId: str | int | None = None
    TotalAmount: float | None = None
    CurrencyCode: str | None = None
    Status: str | None = None
    Items: list[dict[str, Any]] | None = None


class VATEntry(Resource):
    VATCode: str | None = None
    VATRate: float | None = None
    VATBase: float | None = None
    VATAmount: float | None = None


class Journal(Resource):
    Name: str = ""
    Code: str | None = None
    JournalTypeId: str | int | None = None
    IsActive: bool | None = None
    VATEntries: list[VATEntry] | None = None


class JournalSummary(Resource):
    """A row of the journal search list."""

    Name: str = ""
    Code: str | None = None
    JournalTypeId: str | int | None = None
    JournalTypeName: str | None = None
    IsActive: bool | None = None


class JournalEntrySummary(Resource):
    """A row of the journal entry search list."""

    JournalId: str | int | None = None
    JournalName: str | None = None
    DocumentNumber: str | None = None
    DocumentDate: str | None = None
    PostingDate: str | None = None
    Description: str | None = None
    Reference: str | None = None
    TotalDebitAmount: float | None = None
    TotalCreditAmount: float | None = None


class JournalType(Resource):
    Code: str | None = None
    Name: str = ""


class ListResponse(BaseModel, Generic[T]):
    """Paged list envelope used by the search endpoints."""

    model_config = ConfigDict(extra="allow")

    Rows: list[T] = Field(default_factory=list)
    TotalRows: int | None = None
    CurrentPageNumber: int | None = None
    PageSize: int | None = None
