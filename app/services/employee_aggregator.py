"""Employee search, ranking and mutation logic over the upstream provider.

Nothing is cached: every read goes through ``list_all`` so results always
reflect the current upstream state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pydantic

from app.models.employee import CreateEmployeeInput, Employee
from app.services.exceptions import (
    DeletionFailedError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from app.services.upstream_client import EmployeeUpstreamClient, upstream_client

logger = logging.getLogger(__name__)

TOP_EARNERS_LIMIT = 10


def parse_create_input(fields: Any) -> CreateEmployeeInput:
    if isinstance(fields, CreateEmployeeInput):
        return fields
    if not isinstance(fields, Mapping):
        raise ValidationError("Employee fields must be an object")

    try:
        return CreateEmployeeInput.model_validate(dict(fields))
    except pydantic.ValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid employee fields", errors=errors) from e


class EmployeeAggregator:
    def __init__(self, client: EmployeeUpstreamClient) -> None:
        self.client = client

    async def _list_all(self, operation: str) -> list[Employee]:
        try:
            return await self.client.list_all()
        except UpstreamError as e:
            raise UpstreamError(f"Failed to {operation}: {e}", status_code=e.status_code) from e

    async def get_all(self) -> list[Employee]:
        logger.info("Fetching all employees")
        return await self._list_all("fetch all employees")

    async def search_by_name(self, fragment: str) -> list[Employee]:
        logger.info("Searching employees by name: %s", fragment)
        employees = await self._list_all(f"search employees by name '{fragment}'")
        needle = fragment.lower()
        return [e for e in employees if needle in e.name.lower()]

    async def get_by_id(self, employee_id: str) -> Employee:
        logger.info("Fetching employee by id: %s", employee_id)
        try:
            employee = await self.client.get_by_id(employee_id)
        except UpstreamError as e:
            raise UpstreamError(
                f"Failed to fetch employee by id {employee_id}: {e}",
                status_code=e.status_code,
            ) from e

        if employee is None:
            raise NotFoundError(employee_id)
        return employee

    async def highest_salary(self) -> int:
        logger.info("Getting highest salary among employees")
        employees = await self._list_all("get highest salary")
        return max((e.salary for e in employees), default=0)

    async def top_ten_by_earning(self) -> list[str]:
        logger.info("Getting top %d highest earning employees", TOP_EARNERS_LIMIT)
        employees = await self._list_all("get top earning employees")
        # sorted() stays stable with reverse=True, so ties keep listing order
        ranked = sorted(employees, key=lambda e: e.salary, reverse=True)
        return [e.name for e in ranked[:TOP_EARNERS_LIMIT]]

    async def create(self, fields: Any) -> Employee:
        payload = parse_create_input(fields)
        logger.info("Creating employee: %s", payload.name)
        try:
            return await self.client.create(
                name=payload.name,
                salary=payload.salary,
                age=payload.age,
                title=payload.title,
            )
        except UpstreamError as e:
            raise UpstreamError(
                f"Failed to create employee {payload.name}: {e}",
                status_code=e.status_code,
            ) from e

    async def delete_by_id(self, employee_id: str) -> str:
        logger.info("Deleting employee by id: %s", employee_id)
        employee = await self.get_by_id(employee_id)

        try:
            deleted = await self.client.delete_by_name(employee.name)
        except UpstreamError as e:
            raise UpstreamError(
                f"Failed to delete employee {employee_id} ({employee.name}): {e}",
                status_code=e.status_code,
            ) from e

        if not deleted:
            raise DeletionFailedError(employee_id, employee.name)
        return employee.name


employee_aggregator = EmployeeAggregator(upstream_client)
