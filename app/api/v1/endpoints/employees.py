from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from app.core.dependencies import get_current_user
from app.models.auth import UserInfo
from app.models.employee import Employee
from app.services.employee_aggregator import employee_aggregator
from app.services.exceptions import (
    DeletionFailedError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employee", tags=["employee"])


def _upstream_failure(err: UpstreamError, detail: str) -> HTTPException:
    logger.error("%s: %s", detail, err)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@router.get("", response_model=list[Employee])
async def get_all_employees(
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_aggregator.get_all()
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to retrieve employees") from err


@router.get("/search/{search_string}", response_model=list[Employee])
async def get_employees_by_name_search(
    search_string: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_aggregator.search_by_name(search_string)
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to search employees") from err


@router.get("/highestSalary", response_model=int)
async def get_highest_salary_of_employees(
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_aggregator.highest_salary()
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to retrieve highest salary") from err


@router.get("/topTenHighestEarningEmployeeNames", response_model=list[str])
async def get_top_ten_highest_earning_employee_names(
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_aggregator.top_ten_by_earning()
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to retrieve top earning employees") from err


@router.get("/{employee_id}", response_model=Employee)
async def get_employee_by_id(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_aggregator.get_by_id(employee_id)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id '{employee_id}' not found",
        ) from err
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to retrieve employee") from err


@router.post("", response_model=Employee)
async def create_employee(
    fields: Any = Body(...),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employee = await employee_aggregator.create(fields)
    except ValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(err), "errors": err.errors},
        ) from err
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to create employee") from err

    logger.info("Employee created: id=%s user=%s", employee.id, user.username)
    return employee


@router.delete("/{employee_id}", response_model=str)
async def delete_employee_by_id(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        name = await employee_aggregator.delete_by_id(employee_id)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id '{employee_id}' not found",
        ) from err
    except DeletionFailedError as err:
        logger.error("Delete rejected upstream for id=%s user=%s", employee_id, user.username)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(err),
        ) from err
    except UpstreamError as err:
        raise _upstream_failure(err, "Failed to delete employee") from err

    logger.info("Employee deleted: id=%s name=%s user=%s", employee_id, name, user.username)
    return name
