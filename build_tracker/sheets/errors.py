"""Failures raised while talking to the remote sheet store."""
from typing import Optional


class SheetError(Exception):
    """Base exception for sheet store errors."""


class TransportError(SheetError):
    """Raised when the store cannot be reached at all."""


class StoreError(SheetError):
    """Raised when the store answers with a non-success status."""

    def __init__(self, message: str, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DecodeError(SheetError):
    """Raised when a response body does not have the expected shape."""


class TaskNotFoundError(SheetError):
    """Raised when a logical task id is absent from a freshly fetched sheet."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class MetricsNotConfiguredError(SheetError):
    """Raised when a metrics operation is attempted without a metrics sheet."""

    def __init__(self) -> None:
        super().__init__("No metrics sheet is configured (METRICS_SHEET_ID)")
