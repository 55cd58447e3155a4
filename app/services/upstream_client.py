"""HTTP client for the upstream mock employee provider."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any
from urllib.parse import quote

import aiohttp
import pydantic
from yarl import URL

from app.core.config import Settings
from app.models.employee import DeleteEmployeeInput, Employee
from app.services.exceptions import UpstreamError

logger = logging.getLogger(__name__)

DATA_KEY = "data"

# Returned by _send for an upstream 404 and nothing else
NOT_FOUND = object()

# Upstream record field names → Employee attribute names
_FIELD_MAP: list[tuple[str, str]] = [
    ("id", "id"),
    ("name", "employee_name"),
    ("salary", "employee_salary"),
    ("age", "employee_age"),
    ("title", "employee_title"),
    ("email", "employee_email"),
]

_REQUIRED_STR_FIELDS = ("id", "name")
_INT_FIELDS = ("salary", "age")
_OPTIONAL_STR_FIELDS = ("title", "email")


def _coerce_int(field: str, value: Any) -> int:
    # bool is an int subclass; upstream never sends one for numeric fields
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise UpstreamError(f"Field '{field}' is not numeric: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise UpstreamError(f"Field '{field}' is not a finite number: {value!r}")
    return int(value)


def _transform_employee(raw: Any) -> Employee:
    if not isinstance(raw, dict):
        raise UpstreamError(f"Employee record is not an object: {type(raw).__name__}")

    data: dict[str, Any] = {}
    for python_key, upstream_key in _FIELD_MAP:
        data[python_key] = raw.get(upstream_key)

    for field in _REQUIRED_STR_FIELDS:
        if not isinstance(data[field], str):
            raise UpstreamError(f"Field '{field}' missing or not a string: {data[field]!r}")

    for field in _INT_FIELDS:
        data[field] = _coerce_int(field, data[field])

    for field in _OPTIONAL_STR_FIELDS:
        if data[field] is not None and not isinstance(data[field], str):
            raise UpstreamError(f"Field '{field}' is not a string: {data[field]!r}")

    if data["title"] is None:
        data["title"] = ""

    try:
        return Employee(**data)
    except pydantic.ValidationError as e:
        raise UpstreamError(f"Invalid employee record from upstream: {e}") from e


def _unwrap(body: Any) -> Any:
    if not isinstance(body, dict) or DATA_KEY not in body:
        raise UpstreamError("Malformed upstream envelope: missing 'data'")
    return body[DATA_KEY]


def _path_segment(value: str) -> str:
    # quote() leaves dots alone; "." and ".." would be collapsed as path segments
    return quote(value, safe="").replace(".", "%2E")


class EmployeeUpstreamClient:
    def __init__(self) -> None:
        self.session: aiohttp.ClientSession | None = None
        self.base_url = ""
        self.initialized = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.UPSTREAM_BASE_URL:
            logger.warning("Upstream base URL missing - EmployeeUpstreamClient not initialized")
            return

        self.base_url = settings.UPSTREAM_BASE_URL.rstrip("/")
        timeout = aiohttp.ClientTimeout(total=settings.UPSTREAM_TIMEOUT_SECONDS)
        connector = aiohttp.TCPConnector(limit=settings.UPSTREAM_POOL_SIZE)
        self.session = aiohttp.ClientSession(timeout=timeout, connector=connector)
        self.initialized = True
        logger.info("EmployeeUpstreamClient initialized (base_url=%s)", self.base_url)

    async def close(self) -> None:
        if self.session:
            await self.session.close()
        self.session = None
        self.base_url = ""
        self.initialized = False

    def _employee_url(self, employee_id: str) -> URL:
        return URL(f"{self.base_url}/{_path_segment(employee_id)}", encoded=True)

    async def _send(
        self,
        method: str,
        url: str | URL,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one request and return the parsed JSON body.

        Returns ``NOT_FOUND`` for an upstream 404; every other failure raises UpstreamError.
        """
        if not self.initialized or not self.session:
            raise UpstreamError("EmployeeUpstreamClient not initialized")

        try:
            async with self.session.request(method, url, json=payload) as response:
                if response.status == 404:
                    return NOT_FOUND

                if response.status >= 400:
                    error_text = await response.text()
                    raise UpstreamError(
                        f"Upstream {method} {url} failed: {response.status} - {error_text}",
                        status_code=response.status,
                    )

                return await response.json(content_type=None)
        except UpstreamError:
            raise
        except asyncio.TimeoutError as e:
            raise UpstreamError(f"Upstream {method} {url} timed out") from e
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Upstream {method} {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Upstream {method} {url} returned invalid JSON: {e}") from e

    async def list_all(self) -> list[Employee]:
        logger.info("Fetching all employees from upstream")
        body = await self._send("GET", self.base_url)
        if body is NOT_FOUND:
            raise UpstreamError("Upstream collection endpoint returned 404", status_code=404)

        records = _unwrap(body)
        if not isinstance(records, list):
            raise UpstreamError("Malformed upstream envelope: 'data' is not a list")

        return [_transform_employee(record) for record in records]

    async def get_by_id(self, employee_id: str) -> Employee | None:
        logger.info("Fetching employee by id: %s", employee_id)
        body = await self._send("GET", self._employee_url(employee_id))
        if body is NOT_FOUND:
            logger.warning("Employee not found for id: %s", employee_id)
            return None

        record = _unwrap(body)
        if record is None:
            logger.warning("Employee not found for id: %s", employee_id)
            return None

        return _transform_employee(record)

    async def create(self, name: str, salary: int, age: int, title: str) -> Employee:
        logger.info("Creating employee: %s", name)
        payload = {"name": name, "salary": salary, "age": age, "title": title}
        body = await self._send("POST", self.base_url, payload)
        if body is NOT_FOUND:
            raise UpstreamError("Upstream create endpoint returned 404", status_code=404)

        return _transform_employee(_unwrap(body))

    async def delete_by_name(self, name: str) -> bool:
        logger.info("Deleting employee by name: %s", name)
        payload = DeleteEmployeeInput(name=name).model_dump()
        body = await self._send("DELETE", self.base_url, payload)
        if body is NOT_FOUND:
            logger.warning("Employee not found for delete: %s", name)
            return False

        return _unwrap(body) is True

    async def check_connection(self) -> bool:
        if not self.initialized:
            return False
        try:
            await self._send("GET", self.base_url)
            return True
        except UpstreamError:
            logger.exception("Upstream connection check failed")
            return False


upstream_client = EmployeeUpstreamClient()
