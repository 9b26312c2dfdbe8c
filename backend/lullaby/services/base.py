"""Base service class with consistent error handling and logging.

External collaborators (synthesis backends) inherit from BaseService for:
- Consistent logging with service name prefix
- Health check pattern
- HTTP client management with connection-error wrapping
"""
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..core import get_logger
from ..core.exceptions import ServiceUnavailableError


class BaseService(ABC):
    """Base class for HTTP-backed services."""

    def __init__(
        self,
        service_name: str,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """Initialize the service.

        Args:
            service_name: Human-readable service name (e.g., "Kokoro")
            base_url: Base URL for HTTP requests
            timeout: Default request timeout in seconds
        """
        self.service_name = service_name
        self.base_url = base_url
        self.timeout = timeout
        self.logger = get_logger(f"service.{service_name.lower()}")
        self._client: Optional[httpx.AsyncClient] = None
        self._is_available: Optional[bool] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @property
    def is_available(self) -> bool:
        """Result of the last health check (False before any check)."""
        return bool(self._is_available)

    async def check_health(self) -> bool:
        """Check if the service is healthy and available.

        Subclasses override _health_check(); this wrapper never raises.
        """
        try:
            self._is_available = await self._health_check()
        except (httpx.HTTPError, ServiceUnavailableError) as e:
            self.logger.warning(f"{self.service_name} health check error: {e}")
            self._is_available = False

        if self._is_available:
            self.logger.debug(f"{self.service_name} is healthy")
        else:
            self.logger.warning(f"{self.service_name} health check failed")
        return self._is_available

    @abstractmethod
    async def _health_check(self) -> bool:
        """Service-specific health check; True if the service is usable."""

    def _wrap_connection_error(self, error: Exception) -> ServiceUnavailableError:
        return ServiceUnavailableError(
            service_name=self.service_name,
            url=self.base_url,
            suggestion=self._get_recovery_suggestion(),
        )

    def _get_recovery_suggestion(self) -> str:
        """Override in subclasses for service-specific suggestions."""
        return f"Check if {self.service_name} is running"

    async def _http_get(self, path: str, **kwargs) -> httpx.Response:
        """GET base_url + path.

        Raises:
            ServiceUnavailableError: If connection fails
            httpx.HTTPStatusError: On a non-2xx response
        """
        url = f"{self.base_url}{path}" if self.base_url else path
        try:
            response = await self.client.get(url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.ConnectError as e:
            self.logger.error(f"Connection failed to {url}: {e}")
            raise self._wrap_connection_error(e)
        except httpx.HTTPStatusError as e:
            self.logger.error(f"HTTP error from {url}: {e.response.status_code}")
            raise

    async def _http_post(self, path: str, **kwargs) -> httpx.Response:
        """POST base_url + path.

        Raises:
            ServiceUnavailableError: If connection fails
            httpx.HTTPStatusError: On a non-2xx response
        """
        url = f"{self.base_url}{path}" if self.base_url else path
        try:
            response = await self.client.post(url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.ConnectError as e:
            self.logger.error(f"Connection failed to {url}: {e}")
            raise self._wrap_connection_error(e)
        except httpx.HTTPStatusError as e:
            self.logger.error(f"HTTP error from {url}: {e.response.status_code}")
            raise
