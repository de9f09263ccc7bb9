"""
Domain specific exception hierarchy for the digitalocean_client package.
"""

from __future__ import annotations

from datetime import datetime


class DigitalOceanError(Exception):
    """Base exception for all library errors."""


class ConfigurationError(DigitalOceanError):
    """Raised when required configuration or credentials are missing."""


class ClientClosedError(DigitalOceanError):
    """Raised when an operation is attempted on a client that was closed."""


class TransientIOError(DigitalOceanError):
    """Raised when a network failure or transport timeout interrupts a request.

    These errors are typically transient, and retrying the request may resolve the issue.
    """


class OperationTimeout(DigitalOceanError):
    """Raised when a blocking operation exhausts its time budget."""

    def __init__(self, message: str, *, quota: float) -> None:
        super().__init__(message)
        self.quota = quota


class ApiResponseError(DigitalOceanError):
    """Raised when the DigitalOcean API returns an error payload."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        error_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.error_id = error_id


class AccessDeniedError(ApiResponseError):
    """Raised when the server rejects a request due to insufficient permissions."""


class ResourceNotFoundError(ApiResponseError):
    """Raised when a referenced resource could not be found."""

    def __init__(self, resource: str, *, status: int | None = 404, error_id: str | None = None) -> None:
        super().__init__(f"Resource not found: {resource}", status=status, error_id=error_id)
        self.resource = resource


class RateLimitExceeded(ApiResponseError):
    """Raised when the client surpassed the server's rate limit."""

    def __init__(
        self,
        message: str,
        *,
        requests_per_minute: int | None = None,
        requests_per_hour: int | None = None,
        retry_after: float = 0.0,
        reset_at: datetime | None = None,
        sleep_duration: float = 0.0,
    ) -> None:
        super().__init__(message, status=429, error_id="too_many_requests")
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.retry_after = retry_after
        self.reset_at = reset_at
        self.sleep_duration = sleep_duration


class PreconditionFailedError(ApiResponseError):
    """Raised when the server refuses a request because of the resource's current state."""


class ResourceBusyError(PreconditionFailedError):
    """Raised when a conflicting operation is already in progress on the server."""


class UnsupportedCombinationError(ApiResponseError):
    """
    Raised when the server rejects a combination of parameters that are individually valid.

    Such constraints cannot be validated client-side and are only discovered at runtime.
    """


class UnprocessableEntityError(ApiResponseError):
    """Raised when the server rejects a request body that it could not process."""


class NameConflictError(UnprocessableEntityError):
    """Raised when the requested resource name is already in use."""


class PendingDeletionError(ApiResponseError):
    """
    Raised when a resource name is reserved by a resource that is pending deletion.

    While deletion is in progress the name cannot be reused, and the existing resource can neither be
    retrieved nor interacted with. Deletions may take up to 15 minutes to complete.
    """


class UnexpectedResponseError(AssertionError):
    """
    Raised when the server returns a response outside the known API contract.

    Indicates a client defect rather than a recoverable condition and is not a DigitalOceanError.
    """

    def __init__(self, request: str, response: str) -> None:
        super().__init__(f"Unexpected response: {response}\nRequest: {request}")
        self.request = request
        self.response = response
