"""Employee models for the upstream employee provider."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Employee(BaseModel):
    """Canonical employee record as returned by upstream."""

    id: str
    name: str = Field(..., min_length=1)
    salary: int = Field(..., ge=0)
    age: int
    title: str = ""
    email: str | None = None


class CreateEmployeeInput(BaseModel):
    """Validated creation payload; unknown keys in the request body are dropped."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(..., min_length=1)
    salary: int = Field(..., ge=0)
    age: int = Field(..., gt=0)
    title: str


class DeleteEmployeeInput(BaseModel):
    name: str
