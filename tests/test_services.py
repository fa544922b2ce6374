"""Tests for services/: endpoint building, OData filters and CRUD calls."""
import pytest

from minimax.models.resources import Customer, Employee, Organization, ReceivedInvoice
from minimax.services.base import odata_filter, quote
from minimax.services.customers import CustomerService
from minimax.services.employees import EmployeeService
from minimax.services.organizations import OrganizationService
from minimax.services.received_invoices import ReceivedInvoiceService


# ── Helpers ──────────────────────────────────────────────────────────

def test_quote_escapes():
    assert quote("O'Brien") == "'O''Brien'"


def test_odata_filter():
    assert odata_filter([]) == {}
    assert odata_filter(["A eq 1", "", "B eq 2"]) == {"$filter": "A eq 1 and B eq 2"}


# ── Endpoints ────────────────────────────────────────────────────────

def test_endpoint_scoped_to_org(mock_client):
    service = CustomerService(mock_client)
    assert service._endpoint() == "api/orgs/42/customers"
    assert service._endpoint(7) == "api/orgs/42/customers/7"


def test_endpoint_without_org(mock_client):
    mock_client.session.get_organization_id.return_value = None
    assert CustomerService(mock_client)._endpoint() == "api/customers"


# ── Customers ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_customers_builds_filter(mock_client):
    mock_client.get.return_value = {"value": [{"Id": 1, "Name": "Acme", "RowVersion": "a"}]}
    customers = await CustomerService(mock_client).list(name="Acme", is_active=True)

    assert customers == [Customer(Id=1, Name="Acme", RowVersion="a")]
    endpoint = mock_client.get.call_args[0][0]
    params = mock_client.get.call_args[1]["params"]
    assert endpoint == "api/orgs/42/customers"
    assert params["$filter"] == "contains(Name, 'Acme') and IsActive eq true"
    assert params["$skip"] == 0


@pytest.mark.asyncio
async def test_list_customers_offset_and_limit(mock_client):
    mock_client.get.return_value = {"value": [{"Id": 1}, {"Id": 2}]}
    await CustomerService(mock_client).list(limit=2, offset=10)
    params = mock_client.get.call_args[1]["params"]
    assert params["$top"] == 2
    assert params["$skip"] == 10
    assert "$filter" not in params


@pytest.mark.asyncio
async def test_get_customer(mock_client):
    mock_client.get.return_value = {"Id": 5, "Name": "Acme", "RowVersion": "v1", "Custom": "kept"}
    customer = await CustomerService(mock_client).get(5)

    mock_client.get.assert_awaited_once_with("api/orgs/42/customers/5")
    assert customer.RowVersion == "v1"
    assert customer.model_dump()["Custom"] == "kept"


@pytest.mark.asyncio
async def test_create_customer(mock_client):
    mock_client.post.return_value = {"Id": 9, "Name": "New"}
    customer = await CustomerService(mock_client).create({"Name": "New"})
    mock_client.post.assert_awaited_once_with("api/orgs/42/customers", {"Name": "New"})
    assert customer.Id == 9


@pytest.mark.asyncio
async def test_update_with_fetched_resource(mock_client):
    existing = Customer(Id=5, Name="Acme", RowVersion="v1")
    mock_client.update_with_concurrency.return_value = {"Id": 5, "Name": "Acme 2", "RowVersion": "v2"}

    updated = await CustomerService(mock_client).update(5, {"Name": "Acme 2"}, resource=existing)

    mock_client.update_with_concurrency.assert_awaited_once_with(
        "api/orgs/42/customers/5", existing, {"Name": "Acme 2"}
    )
    mock_client.put.assert_not_awaited()
    assert updated.RowVersion == "v2"


@pytest.mark.asyncio
async def test_update_without_resource(mock_client):
    mock_client.put.return_value = {"Id": 5}
    await CustomerService(mock_client).update(5, {"Name": "x", "RowVersion": "v1"})
    mock_client.put.assert_awaited_once_with("api/orgs/42/customers/5", {"Name": "x", "RowVersion": "v1"})


@pytest.mark.asyncio
async def test_delete_customer(mock_client):
    await CustomerService(mock_client).delete(5)
    mock_client.delete.assert_awaited_once_with("api/orgs/42/customers/5", params=None)


# ── Employees ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_employees_reads_rows(mock_client):
    mock_client.get.return_value = {"Rows": [{"ID": 3, "FirstName": "Ana"}]}
    employees = await EmployeeService(mock_client).list(is_active=False)

    assert isinstance(employees[0], Employee)
    assert employees[0].resource_id == 3
    assert mock_client.get.call_args[1]["params"]["$filter"] == "IsActive eq false"


@pytest.mark.asyncio
async def test_delete_employee_with_row_version(mock_client):
    await EmployeeService(mock_client).delete(3, row_version="v9")
    mock_client.delete.assert_awaited_once_with(
        "api/orgs/42/employees/3", params={"RowVersion": "v9"}
    )


# ── Received invoices ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_received_invoices(mock_client):
    mock_client.get.return_value = {"value": [{"Id": 1, "Number": "R-1"}]}
    invoices = await ReceivedInvoiceService(mock_client).list(
        customer_id=12, date_from="2024-01-01", date_to="2024-01-31"
    )

    assert invoices == [ReceivedInvoice(Id=1, Number="R-1")]
    assert mock_client.get.call_args[0][0] == "api/orgs/42/receivedinvoices"
    assert mock_client.get.call_args[1]["params"]["$filter"] == (
        "CustomerId eq '12' and Date ge 2024-01-01 and Date le 2024-01-31"
    )


# ── Organizations ────────────────────────────────────────────────────

ORGS = {
    "Rows": [
        {"Organisation": {"ID": 1, "Name": "Alpha d.o.o."}, "ApiAccess": True},
        {"Organisation": {"ID": 2, "Name": "Beta"}, "ApiAccess": True},
    ],
    "TotalRows": 2,
}


@pytest.mark.asyncio
async def test_list_organizations(mock_client):
    mock_client.get.return_value = ORGS
    orgs = await OrganizationService(mock_client).list()

    mock_client.get.assert_awaited_once_with("api/currentuser/orgs")
    assert [o.Name for o in orgs] == ["Alpha d.o.o.", "Beta"]
    assert all(isinstance(o, Organization) for o in orgs)
    assert orgs[1].resource_id == 2


@pytest.mark.asyncio
async def test_find_organization(mock_client):
    mock_client.get.return_value = ORGS
    service = OrganizationService(mock_client)

    assert (await service.find_by_name("Beta")).resource_id == 2
    assert (await service.find_by_identifier("Alpha d.o.o.")).resource_id == 1
    assert await service.find_by_name("Gamma") is None
