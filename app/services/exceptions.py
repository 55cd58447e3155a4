"""Error taxonomy shared by the upstream client and the aggregator."""

from __future__ import annotations


class ServiceError(Exception):
    pass


class UpstreamError(ServiceError):
    """Transport, status, envelope or record-mapping failure talking to upstream."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ServiceError):
    def __init__(self, employee_id: str) -> None:
        super().__init__(f"No employee with id {employee_id}")
        self.employee_id = employee_id


class ValidationError(ServiceError):
    """Create fields missing or mistyped.

    ``errors`` carries one ``{"field", "message"}`` entry per offending field.
    """

    def __init__(self, message: str, errors: list[dict[str, str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class DeletionFailedError(ServiceError):
    def __init__(self, employee_id: str, name: str) -> None:
        super().__init__(f"Employee {employee_id} ({name}) exists but upstream rejected the delete")
        self.employee_id = employee_id
        self.name = name
