"""
Authenticated HTTP access to the DigitalOcean REST API.

The client owns the connection pool and the access token. It is shared read-only by every
operation and must be closed explicitly once it is no longer needed.
"""

from __future__ import annotations

import json
import logging
import threading
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Callable, Iterator, Mapping, TypeVar

import requests
from requests.adapters import HTTPAdapter

from digitalocean_client.clients.classifier import expect, raise_for_response, rate_limit_error
from digitalocean_client.config import ClientSettings
from digitalocean_client.exceptions import (
    ClientClosedError,
    ConfigurationError,
    TransientIOError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


class DigitalOceanClient:
    """Issues authenticated requests and drives paginated list endpoints."""

    def __init__(
        self,
        token: str,
        *,
        settings: ClientSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token or token != token.strip():
            raise ConfigurationError("The access token may not be empty or contain surrounding whitespace.")
        self._token = token
        self._settings = settings or ClientSettings()
        self._session = session or self._create_session(self._settings)
        self._lock = threading.Lock()
        self._closed = False

    @staticmethod
    def _create_session(settings: ClientSettings) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=settings.pool_connections,
            pool_maxsize=settings.pool_maxsize,
            max_retries=0,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        # Requests must not depend on state left behind by earlier responses.
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        logger.debug(
            "Created HTTP session | Pool: %d connections | Max: %d",
            settings.pool_connections,
            settings.pool_maxsize,
        )
        return session

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def closed(self) -> bool:
        return self._closed

    def url(self, path: str) -> str:
        """Resolve a path such as ``v2/droplets`` against the REST server."""

        return f"{self._settings.base_url.rstrip('/')}/{path.lstrip('/')}"

    # ------------------------------------------------------------------
    # Request execution
    # ------------------------------------------------------------------

    def create_request(
        self,
        url: str,
        body: Any = None,
        *,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
    ) -> requests.Request:
        """Build an authenticated request. ``body`` is sent as JSON when present."""

        self._ensure_open()
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }
        return requests.Request(
            method=method,
            url=url,
            headers=headers,
            json=body,
            params=dict(params) if params else None,
        )

    def send(self, request: requests.Request, *, timeout: float | tuple[float, float] | None = None) -> requests.Response:
        """
        Send a request and return the server's response.

        Raises:
            ClientClosedError: if the client was closed
            TransientIOError: if a network error or transport timeout occurs
            RateLimitExceeded: if the server responds with 429
        """

        self._ensure_open()
        prepared = self._session.prepare_request(request)
        logger.debug("%s %s", prepared.method, prepared.url)
        try:
            response = self._session.send(prepared, timeout=timeout or self._settings.timeout)
        except TRANSIENT_ERRORS as exc:
            raise TransientIOError(f"{prepared.method} {prepared.url} failed: {exc}") from exc
        # Drop anything the server tried to store despite the cookie policy.
        self._session.cookies.clear()
        logger.debug("%s %s -> %d", prepared.method, prepared.url, response.status_code)

        if response.status_code == 429:
            raise rate_limit_error(response)
        return response

    def get_metadata_value(self, path: str) -> str | None:
        """
        Query the droplet metadata service.

        Returns:
            The value, or None when running outside a droplet.
        """

        self._ensure_open()
        url = f"{self._settings.metadata_url.rstrip('/')}/metadata/v1/{path.lstrip('/')}"
        try:
            response = self._session.get(url, timeout=self._settings.metadata_timeout)
        except TRANSIENT_ERRORS:
            logger.debug("Metadata service is unavailable: %s", url)
            return None
        if response.status_code != 200:
            return None
        return response.text.strip()

    # ------------------------------------------------------------------
    # Resource helpers
    # ------------------------------------------------------------------

    def get_resource(
        self,
        url: str,
        parse: Callable[[Any], T],
        *,
        resource: str | None = None,
    ) -> T:
        """
        Fetch a single resource.

        Raises:
            ResourceNotFoundError: if the server responds with 404
        """

        response = self.send(self.create_request(url))
        body = expect(response, 200, resource=resource)
        return self._map(body, parse)

    def destroy_resource(self, url: str, *, resource: str | None = None) -> None:
        """Delete a resource. A resource that no longer exists counts as deleted."""

        response = self.send(self.create_request(url, method="DELETE"))
        if response.status_code in (202, 204):
            return
        if response.status_code == 404:
            logger.debug("%s was already deleted", resource or url)
            return
        raise_for_response(response, resource=resource)

    def get_elements(
        self,
        url: str,
        key: str,
        parse: Callable[[Any], T],
        predicate: Callable[[T], bool] | None = None,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> list[T]:
        """Return every element of every page that matches ``predicate``, in server order."""

        elements: list[T] = []
        for page in self._iter_pages(url, params):
            for element in self._map_page(page, key, parse):
                if predicate is None or predicate(element):
                    elements.append(element)
        return elements

    def get_element(
        self,
        url: str,
        key: str,
        parse: Callable[[Any], T],
        predicate: Callable[[T], bool],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> T | None:
        """Return the first element that matches ``predicate`` without fetching later pages."""

        for page in self._iter_pages(url, params):
            for element in self._map_page(page, key, parse):
                if predicate(element):
                    return element
        return None

    def _iter_pages(self, url: str, params: Mapping[str, Any] | None) -> Iterator[dict[str, Any]]:
        # https://docs.digitalocean.com/reference/api/intro/#links--pagination
        query: dict[str, Any] | None = {"per_page": self._settings.per_page, **(params or {})}
        next_url: str | None = url
        while next_url is not None:
            response = self.send(self.create_request(next_url, params=query))
            body = expect(response, 200)
            yield body
            next_url = next_page(body)
            # The next link already carries the query string.
            query = None

    @staticmethod
    def _map_page(body: dict[str, Any], key: str, parse: Callable[[Any], T]) -> list[T]:
        try:
            return [parse(element) for element in body[key] or []]
        except (KeyError, TypeError, ValueError):
            logger.warning("Response body: %s", json.dumps(body, indent=2, default=str))
            raise

    @staticmethod
    def _map(body: Any, parse: Callable[[Any], T]) -> T:
        try:
            return parse(body)
        except (KeyError, TypeError, ValueError):
            logger.warning("Response body: %s", json.dumps(body, indent=2, default=str))
            raise

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("client was closed")

    def close(self) -> None:
        """Release pooled connections. Subsequent calls fail with ClientClosedError."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
        logger.debug("Closing HTTP session")
        self._session.close()

    def __enter__(self) -> "DigitalOceanClient":
        self._ensure_open()
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()


def next_page(body: Mapping[str, Any]) -> str | None:
    """Return the URL of the next page of results, or None on the last page."""

    links = body.get("links") or {}
    pages = links.get("pages") or {}
    return pages.get("next") or None
