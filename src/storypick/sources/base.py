"""Shared async HTTP plumbing for remote issue sources."""

import logging
import math
from typing import Any

import httpx

from ..models import Category, SourceConfig, Task

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Base exception for remote source errors."""

    pass


class SourceTransportError(FetchError):
    """The request never got a response."""

    pass


class SourceTimeoutError(FetchError):
    """The source did not answer in time."""

    pass


class SourceStatusError(FetchError):
    """The source answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class SourceAuthenticationError(SourceStatusError):
    """Credentials were rejected."""

    pass


class SourceDecodeError(FetchError):
    """The response body could not be read as an issue list."""

    pass


class RemoteSource:
    """Async issue source backed by httpx.

    Subclasses describe one tracker dialect: the issues endpoint, the query
    parameters selecting a category, the auth header and how an issue item
    maps onto a Task.
    """

    def __init__(self, config: SourceConfig, timeout: float | None = 30.0):
        """Initialize the source.

        Args:
            config: Endpoint and credentials for this source
            timeout: Per-request timeout in seconds, None for no limit
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return self.config.name

    async def __aenter__(self) -> "RemoteSource":
        self._client = httpx.AsyncClient(
            auth=self.auth(),
            headers={"Accept": "application/json", **self.headers()},
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def auth(self) -> httpx.Auth | None:
        """httpx auth for the client, if the dialect uses a standard scheme."""
        return None

    def headers(self) -> dict[str, str]:
        """Extra request headers, e.g. a non-standard Authorization scheme."""
        return {}

    def issues_url(self) -> str:
        """Full URL of the issues endpoint."""
        raise NotImplementedError

    def query_params(self, value: str) -> dict[str, Any]:
        """Query parameters selecting issues whose status matches ``value``."""
        raise NotImplementedError

    def project(self, item: dict[str, Any]) -> Task | None:
        """Map one issue item to a Task, or None if required fields are missing."""
        raise NotImplementedError

    async def _request(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """Make one GET request with error handling."""
        if not self._client:
            raise FetchError("Source not opened. Use async with context.")

        logger.debug("GET %s (source=%s)", url, self.name)
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise SourceTimeoutError(f"Timeout: {self.base_url} did not respond") from e
        except httpx.DecodingError as e:
            raise SourceDecodeError(
                f"Response from {self.name} could not be decoded: {e}"
            ) from e
        except httpx.TransportError as e:
            raise SourceTransportError(
                f"Connection error: could not reach {self.base_url} - {e}"
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise SourceTransportError(f"Request to {self.name} failed: {e}") from e

        if response.status_code in (401, 403):
            raise SourceAuthenticationError(
                response.status_code,
                f"Authentication failed ({response.status_code}) for {self.name}",
            )
        elif response.status_code >= 400:
            raise SourceStatusError(
                response.status_code,
                f"API error {response.status_code}: {response.text}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SourceDecodeError(f"Response from {self.name} is not JSON") from e

        if not isinstance(data, dict):
            raise SourceDecodeError(f"Response from {self.name} is not a JSON object")
        return data

    async def fetch(self, category: Category) -> list[Task]:
        """Fetch the tasks currently in ``category``.

        Args:
            category: Which column/status to request

        Returns:
            Tasks in response order; malformed items are dropped

        Raises:
            FetchError: On misconfiguration, transport failure, bad status or
                undecodable body
        """
        if not self.config.is_configured():
            raise FetchError(f"Source '{self.name}' is missing an endpoint or credential")

        value = category.query_value(self.config)
        if value is None:
            raise FetchError(
                f"Source '{self.name}' has no column configured for '{category.value}'"
            )

        data = await self._request(self.issues_url(), self.query_params(value))

        issues = data.get("issues")
        if not isinstance(issues, list):
            raise SourceDecodeError(f"Response from {self.name} has no 'issues' array")

        tasks = []
        for item in issues:
            task = self.project(item) if isinstance(item, dict) else None
            if task is None:
                logger.debug("Dropping malformed issue from %s: %r", self.name, item)
                continue
            tasks.append(task)

        logger.debug("Fetched %d task(s) from %s", len(tasks), self.name)
        return tasks


def text_field(value: Any) -> str | None:
    """Return ``value`` if it is a non-empty string."""
    if isinstance(value, str) and value:
        return value
    return None


def position_field(value: Any) -> int:
    """Read an optional numeric position; anything else counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return 0
    return 0
