"""
Maps DigitalOcean HTTP responses onto payloads or the library's exception hierarchy.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

import requests

from digitalocean_client.exceptions import (
    AccessDeniedError,
    ApiResponseError,
    NameConflictError,
    PreconditionFailedError,
    RateLimitExceeded,
    ResourceBusyError,
    ResourceNotFoundError,
    UnexpectedResponseError,
    UnprocessableEntityError,
    UnsupportedCombinationError,
)
from digitalocean_client.models import ErrorBody
from digitalocean_client.rate_limit import RateLimitInfo

logger = logging.getLogger(__name__)

# Matched case-insensitively as substrings of the error body's "message".
PRECONDITION_FAILED_PHRASES: tuple[tuple[str, type[ApiResponseError]], ...] = (
    ("delete operations are not available while garbage collection is running", ResourceBusyError),
    ("manifest is referenced by one or more other manifests", PreconditionFailedError),
    ("is not available in the selected region", UnsupportedCombinationError),
    ("is not available in this region", UnsupportedCombinationError),
)

UNPROCESSABLE_ENTITY_PHRASES: tuple[tuple[str, type[ApiResponseError]], ...] = (
    ("a cluster with this name already exists", NameConflictError),
    ("cluster name is not available", NameConflictError),
    ("ssh key is already in use on your account", NameConflictError),
    ("already in progress", ResourceBusyError),
    ("cannot create a droplet with a smaller disk than the image", UnsupportedCombinationError),
    ("invalid size", UnsupportedCombinationError),
)

TEXTUAL_CONTENT_TYPES = frozenset(
    {
        "application/json",
        "application/ld+json",
        "application/javascript",
        "application/x-www-form-urlencoded",
        "application/x-yaml",
        "application/xml",
        "text/csv",
        "text/html",
        "text/plain",
        "text/xml",
    }
)


def decode_body(response: requests.Response) -> Any:
    """Return the decoded JSON body, or an empty dict if the response has no content."""

    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as exc:
        raise UnexpectedResponseError(
            describe_request(response.request), describe_response(response)
        ) from exc


def expect(response: requests.Response, *statuses: int, resource: str | None = None) -> Any:
    """
    Return the JSON body of ``response`` if its status is one of ``statuses``.

    Raises:
        ApiResponseError: for the documented error statuses (see ``raise_for_response``)
        UnexpectedResponseError: for anything else
    """

    if response.status_code in statuses:
        return decode_body(response)
    raise_for_response(response, resource=resource)


def raise_for_response(response: requests.Response, *, resource: str | None = None) -> NoReturn:
    """Raise the typed error corresponding to an unsuccessful response."""

    status = response.status_code
    error = _error_body(response)
    logger.debug("HTTP %s from %s: %s", status, response.url, error.message)

    if status == 401:
        raise AccessDeniedError(error.message or "Access denied.", status=status, error_id=error.id)
    if status == 404:
        raise ResourceNotFoundError(resource or response.request.url or "unknown", error_id=error.id)
    if status == 412:
        error_type = match_phrase(error.message, PRECONDITION_FAILED_PHRASES)
        if error_type is not None:
            raise error_type(error.message, status=status, error_id=error.id)
    elif status == 422:
        error_type = match_phrase(error.message, UNPROCESSABLE_ENTITY_PHRASES) or UnprocessableEntityError
        raise error_type(error.message, status=status, error_id=error.id)
    elif status == 429:
        raise rate_limit_error(response)

    raise UnexpectedResponseError(describe_request(response.request), describe_response(response))


def match_phrase(
    message: str,
    catalog: tuple[tuple[str, type[ApiResponseError]], ...],
) -> type[ApiResponseError] | None:
    lowered = message.lower()
    for phrase, error_type in catalog:
        if phrase in lowered:
            return error_type
    return None


def rate_limit_error(response: requests.Response) -> RateLimitExceeded:
    """Build the rate limit error for a 429 response from its headers."""

    info = RateLimitInfo.from_headers(response.headers)
    sleep_duration = info.sleep_duration()
    return RateLimitExceeded(
        f"The client must wait {sleep_duration:.1f} seconds to make another request.",
        requests_per_minute=info.requests_per_minute,
        requests_per_hour=info.requests_per_hour,
        retry_after=info.retry_after,
        reset_at=info.reset_at,
        sleep_duration=sleep_duration,
    )


def _error_body(response: requests.Response) -> ErrorBody:
    try:
        payload = response.json() if response.content else {}
    except ValueError:
        payload = {}
    return ErrorBody.from_api(payload)


# ============================================================================
# Diagnostics
# ============================================================================


def describe_request(request: requests.PreparedRequest | None) -> str:
    """Render a request the way it went over the wire, with credentials redacted."""

    if request is None:
        return "< [unknown request]\n"

    lines = [f"< HTTP {request.method} {request.url}"]
    if request.headers:
        lines.append("<")
        for name, value in request.headers.items():
            if name.lower() == "authorization":
                value = "Bearer [redacted]"
            lines.append(f"< {name}: {value}")

    body = _request_body_as_string(request)
    if body:
        lines.append("<")
        lines.extend(f"< {line}" for line in body.splitlines())
    return "\n".join(lines) + "\n"


def describe_response(response: requests.Response) -> str:
    """Render the status line, headers and body of a response."""

    lines = [f"HTTP {response.status_code} (\"{response.reason or ''}\")"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    text = response.text if response.content else ""
    if text:
        lines.append("")
        lines.append(text)
    return "\n".join(lines)


def _request_body_as_string(request: requests.PreparedRequest) -> str:
    body = request.body
    if not body:
        return ""
    content_type = (request.headers.get("Content-Type") or "").split(";")[0].strip().lower()
    if content_type and content_type not in TEXTUAL_CONTENT_TYPES:
        return f"[{len(body)} bytes]"
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return str(body)
