from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from app.core.dependencies import get_current_user
from app.main import app
from app.models.employee import Employee
from app.services.employee_aggregator import employee_aggregator
from app.services.exceptions import (
    DeletionFailedError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

BASE = "/api/v1/employee"


def test_employee_routes_require_auth(client):
    for method, path in [
        ("get", BASE),
        ("get", f"{BASE}/search/ja"),
        ("get", f"{BASE}/highestSalary"),
        ("get", f"{BASE}/topTenHighestEarningEmployeeNames"),
        ("get", f"{BASE}/1"),
        ("delete", f"{BASE}/1"),
    ]:
        response = getattr(client, method)(path)
        assert response.status_code == 401, path


def test_get_all_employees(authenticated_client, sample_employees):
    with patch.object(employee_aggregator, "get_all", AsyncMock(return_value=sample_employees)):
        response = authenticated_client.get(BASE)

    assert response.status_code == 200
    data = response.json()
    assert [e["id"] for e in data] == ["1", "2", "3", "4"]
    assert data[0] == {
        "id": "1",
        "name": "John",
        "salary": 1000,
        "age": 30,
        "title": "Engineer",
        "email": "john@company.com",
    }


def test_get_all_employees_upstream_failure_returns_502(authenticated_client):
    with patch.object(employee_aggregator, "get_all", AsyncMock(side_effect=UpstreamError("down"))):
        response = authenticated_client.get(BASE)

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to retrieve employees"


def test_search_employees(authenticated_client, sample_employees):
    mock_search = AsyncMock(return_value=[sample_employees[1]])
    with patch.object(employee_aggregator, "search_by_name", mock_search):
        response = authenticated_client.get(f"{BASE}/search/ja")

    assert response.status_code == 200
    assert [e["name"] for e in response.json()] == ["Jane"]
    mock_search.assert_awaited_once_with("ja")


def test_highest_salary(authenticated_client):
    with patch.object(employee_aggregator, "highest_salary", AsyncMock(return_value=3000)):
        response = authenticated_client.get(f"{BASE}/highestSalary")

    assert response.status_code == 200
    assert response.json() == 3000


def test_top_ten_names(authenticated_client):
    names = ["Alice", "Jane", "Bob", "John"]
    with patch.object(employee_aggregator, "top_ten_by_earning", AsyncMock(return_value=names)):
        response = authenticated_client.get(f"{BASE}/topTenHighestEarningEmployeeNames")

    assert response.status_code == 200
    assert response.json() == names


def test_get_employee_by_id(authenticated_client, sample_employees):
    with patch.object(employee_aggregator, "get_by_id", AsyncMock(return_value=sample_employees[3])):
        response = authenticated_client.get(f"{BASE}/4")

    assert response.status_code == 200
    assert response.json()["name"] == "Alice"


def test_get_employee_by_id_not_found(authenticated_client):
    with patch.object(employee_aggregator, "get_by_id", AsyncMock(side_effect=NotFoundError("99"))):
        response = authenticated_client.get(f"{BASE}/99")

    assert response.status_code == 404
    assert "99" in response.json()["detail"]


def test_get_employee_by_id_upstream_failure(authenticated_client):
    error = UpstreamError("rate limited", status_code=429)
    with patch.object(employee_aggregator, "get_by_id", AsyncMock(side_effect=error)):
        response = authenticated_client.get(f"{BASE}/2")

    assert response.status_code == 502


def test_create_employee(authenticated_client):
    created = Employee(id="5", name="Eve", salary=2500, age=29, title="DevOps", email="eve@company.com")
    body = {"name": "Eve", "salary": 2500, "age": 29, "title": "DevOps"}
    mock_create = AsyncMock(return_value=created)

    with patch.object(employee_aggregator, "create", mock_create):
        response = authenticated_client.post(BASE, json=body)

    assert response.status_code == 200
    assert response.json()["id"] == "5"
    assert response.json()["email"] == "eve@company.com"
    mock_create.assert_awaited_once_with(body)


def test_create_employee_invalid_fields_returns_400(authenticated_client):
    error = ValidationError("Invalid employee fields", errors=[{"field": "salary", "message": "bad"}])
    with patch.object(employee_aggregator, "create", AsyncMock(side_effect=error)):
        response = authenticated_client.post(BASE, json={"name": "Eve", "salary": "lots"})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["message"] == "Invalid employee fields"
    assert detail["errors"] == [{"field": "salary", "message": "bad"}]


def test_create_employee_real_validation_path(authenticated_client):
    response = authenticated_client.post(BASE, json={"name": "Eve", "salary": "lots", "age": 29, "title": "X"})

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["detail"]["errors"]] == ["salary"]


def test_create_employee_non_object_body_returns_400(authenticated_client):
    response = authenticated_client.post(BASE, json=["Eve", 2500])
    assert response.status_code == 400


def test_delete_employee(authenticated_client):
    with patch.object(employee_aggregator, "delete_by_id", AsyncMock(return_value="John")):
        response = authenticated_client.delete(f"{BASE}/1")

    assert response.status_code == 200
    assert response.json() == "John"


def test_delete_employee_not_found(authenticated_client):
    with patch.object(employee_aggregator, "delete_by_id", AsyncMock(side_effect=NotFoundError("99"))):
        response = authenticated_client.delete(f"{BASE}/99")

    assert response.status_code == 404


def test_delete_employee_rejected_upstream_returns_409(authenticated_client):
    error = DeletionFailedError("1", "John")
    with patch.object(employee_aggregator, "delete_by_id", AsyncMock(side_effect=error)):
        response = authenticated_client.delete(f"{BASE}/1")

    assert response.status_code == 409
    assert "John" in response.json()["detail"]


def test_delete_employee_upstream_failure_returns_502(authenticated_client):
    with patch.object(employee_aggregator, "delete_by_id", AsyncMock(side_effect=UpstreamError("down"))):
        response = authenticated_client.delete(f"{BASE}/1")

    assert response.status_code == 502


@pytest.mark.anyio
async def test_get_all_employees_async_client(async_client, mock_user, sample_employees):
    app.dependency_overrides[get_current_user] = lambda: mock_user

    with patch.object(employee_aggregator, "get_all", AsyncMock(return_value=sample_employees)):
        response = await async_client.get(BASE)

    assert response.status_code == 200
    assert len(response.json()) == 4
