"""Rootly API client.

Async JSON:API client over httpx. Pages and details are cached for a short
TTL; transient failures are retried with backoff. Every failure surfaces as
an ApiError subclass.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config.constants import (
    CACHE_TTL_SECONDS,
    DEFAULT_PAGE_SIZE,
    REQUEST_TIMEOUT_SECONDS,
)
from ..config.settings import Config
from ..exceptions import (
    ApiAuthenticationError,
    ApiConnectionError,
    ApiRateLimitError,
    ApiResponseError,
    ConfigurationError,
)
from ..models import Alert, Incident, PageResult, PaginationInfo
from ..utils.retry import retry
from .cache import CacheKey, TTLCache
from .persistent_cache import PersistentCache

logger = logging.getLogger(__name__)

JSONAPI_CONTENT_TYPE = "application/vnd.api+json"

INCIDENT_DETAIL_INCLUDES = (
    "roles",
    "causes",
    "incident_types",
    "functionalities",
    "user",
)

ALERT_DETAIL_INCLUDES = (
    "responders",
    "notified_users",
    "incidents",
)


class RootlyClient:
    """Client for the Rootly REST API.

    Usage:
        client = RootlyClient(config)
        page = await client.list_incidents(page=1, sort="-created_at")
        incident = await client.get_incident(page.items[0].id)
        await client.aclose()
    """

    def __init__(
        self,
        config: Config,
        *,
        page_size: Optional[int] = None,
        cache_ttl: float = CACHE_TTL_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        disk_cache: Optional[PersistentCache] = None,
    ) -> None:
        if not config.is_valid():
            raise ConfigurationError("API key and endpoint are required")

        self.base_url = config.base_url
        self.page_size = page_size or config.page_size or DEFAULT_PAGE_SIZE
        self._cache: TTLCache[Any] = TTLCache(ttl=cache_ttl, name="rootly")
        self._disk_cache = disk_cache
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": JSONAPI_CONTENT_TYPE,
                "Accept": JSONAPI_CONTENT_TYPE,
            },
            timeout=REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )
        logger.debug("Created API client for %s", self.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RootlyClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def clear_cache(self) -> int:
        """Drop every cached page and detail in memory and on disk (manual refresh)."""
        stats = self._cache.stats
        logger.debug(
            "Memory cache before refresh: %d hits, %d misses (%.0f%% hit rate)",
            stats.hits,
            stats.misses,
            stats.hit_rate,
        )
        count = self._cache.clear()
        if self._disk_cache is not None:
            count += self._disk_cache.clear()
        logger.debug("Cleared API cache (%d entries)", count)
        return count

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    @retry(max_retries=2)
    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.debug("API request GET %s params=%s", path, params)
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise ApiConnectionError("Request timed out", path=path) from e
        except httpx.TransportError as e:
            raise ApiConnectionError(f"Could not reach {self.base_url}", path=path) from e

        status = response.status_code
        logger.debug("API response %s %s (%d bytes)", status, path, len(response.content))

        if status in (401, 403):
            raise ApiAuthenticationError("Invalid API key", status_code=status)
        if status == 429:
            raise ApiRateLimitError(retry_after=_retry_after(response))
        if status == 404:
            raise ApiResponseError("Not found", status_code=status, path=path)
        if status != 200:
            raise ApiResponseError(f"API returned status {status}", status_code=status, path=path)

        try:
            body = response.json()
        except ValueError as e:
            raise ApiResponseError("Failed to parse response", status_code=status, path=path) from e
        if not isinstance(body, dict):
            raise ApiResponseError("Unexpected response shape", status_code=status, path=path)
        return body

    async def _get_body(self, key: str, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Response body from the disk cache when fresh, otherwise from the API."""
        disk_key = f"{self.base_url}|{key}"
        if self._disk_cache is not None:
            body = self._disk_cache.get(disk_key)
            if body is not None:
                return body
        body = await self._get(path, params=params)
        if self._disk_cache is not None:
            self._disk_cache.set(disk_key, body)
        return body

    def _list_params(self, page: int, sort: Optional[str]) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "page[number]": page,
            "page[size]": self.page_size,
        }
        if sort:
            params["sort"] = sort
        return params

    # -------------------------------------------------------------------------
    # Incidents
    # -------------------------------------------------------------------------

    async def list_incidents(self, page: int = 1, sort: Optional[str] = None) -> PageResult[Incident]:
        """Fetch one page of incidents."""
        key = (
            CacheKey("incidents")
            .with_("page", page)
            .with_("size", self.page_size)
            .with_("sort", sort)
            .build()
        )
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        body = await self._get_body(key, "/v1/incidents", params=self._list_params(page, sort))
        items = [Incident.from_api(d) for d in _data_list(body)]
        result = PageResult(items=items, pagination=PaginationInfo.from_api(body, page))
        logger.info(
            "Fetched %d incidents (page %d/%s)",
            len(items),
            result.pagination.current_page,
            result.pagination.total_pages or "?",
        )

        self._cache.set(key, result)
        return result

    async def get_incident(self, incident_id: str, updated_at: Optional[str] = None) -> Incident:
        """Fetch one incident with its detail-only relationships."""
        key = CacheKey("incident").with_("id", incident_id).with_("updated", updated_at).build()
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        body = await self._get_body(
            key,
            f"/v1/incidents/{incident_id}",
            params={"include": ",".join(INCIDENT_DETAIL_INCLUDES)},
        )
        data = body.get("data")
        if not isinstance(data, dict):
            raise ApiResponseError("Incident response has no data", incident_id=incident_id)

        incident = Incident.from_api(data, included=body.get("included") or [], detail=True)
        logger.info("Fetched incident detail %s", incident.sequential_id or incident_id)
        self._cache.set(key, incident)
        return incident

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    async def list_alerts(self, page: int = 1, sort: Optional[str] = None) -> PageResult[Alert]:
        """Fetch one page of alerts."""
        key = (
            CacheKey("alerts")
            .with_("page", page)
            .with_("size", self.page_size)
            .with_("sort", sort)
            .build()
        )
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        body = await self._get_body(key, "/v1/alerts", params=self._list_params(page, sort))
        items = [Alert.from_api(d) for d in _data_list(body)]
        result = PageResult(items=items, pagination=PaginationInfo.from_api(body, page))
        logger.info("Fetched %d alerts (page %d)", len(items), result.pagination.current_page)

        self._cache.set(key, result)
        return result

    async def get_alert(self, alert_id: str, updated_at: Optional[str] = None) -> Alert:
        """Fetch one alert with its detail-only relationships."""
        key = CacheKey("alert").with_("id", alert_id).with_("updated", updated_at).build()
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        body = await self._get_body(
            key,
            f"/v1/alerts/{alert_id}",
            params={"include": ",".join(ALERT_DETAIL_INCLUDES)},
        )
        data = body.get("data")
        if not isinstance(data, dict):
            raise ApiResponseError("Alert response has no data", alert_id=alert_id)

        alert = Alert.from_api(data, detail=True)
        logger.info("Fetched alert detail %s", alert.short_id or alert_id)
        self._cache.set(key, alert)
        return alert

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def validate_api_key(self) -> str:
        """Check the key against /v1/users/me.

        Returns:
            The authenticated user's display name (may be empty).

        Raises:
            ApiAuthenticationError: when the key is rejected.
        """
        body = await self._get("/v1/users/me")
        attrs = (body.get("data") or {}).get("attributes") or {}
        name = attrs.get("full_name") or attrs.get("name") or attrs.get("email") or ""
        logger.info("API key validated for %s", name or "unknown user")
        return str(name)


def _data_list(body: Dict[str, Any]) -> list:
    data = body.get("data")
    if data is None:
        return []
    if not isinstance(data, list):
        raise ApiResponseError("Expected a list in response data")
    return [d for d in data if isinstance(d, dict)]


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
