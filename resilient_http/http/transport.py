import logging
from typing import Any, Optional, Protocol, Type

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from .exceptions import (
    AuthenticationError,
    HttpStatusError,
    NetworkError,
    NotFoundError,
    RequestTimeoutError,
    ServiceUnavailableError,
    ValidationError,
)
from .models import HttpResponse

logger = logging.getLogger(__name__)


class HttpTransport(Protocol):
    """Issues one request and returns its envelope, or raises a failure with ``status``."""

    async def request(self, method: str, url: str, **options: Any) -> HttpResponse:
        ...


class HttpxTransport:
    """
    Async HTTP transport backed by httpx.

    Features:
    - Connection pooling (via httpx.AsyncClient).
    - Pydantic model deserialization.
    - Failures mapped to HttpStatusError subclasses carrying ``status``.

    Retries are not done here; ResilientHttpClient owns the retry policy.
    """

    def __init__(
        self,
        base_url: str = "",
        headers: Optional[dict] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        default_headers = {"Accept": "application/json"}
        if headers:
            default_headers.update(headers)

        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=default_headers,
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    def _map_exception(self, exc: httpx.HTTPError, url: str) -> HttpStatusError:
        """Map httpx exceptions to status-carrying failures."""
        if isinstance(exc, httpx.TimeoutException):
            return RequestTimeoutError("Request timed out", status=408, url=url)
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            text = exc.response.text
            if status in (401, 403):
                return AuthenticationError("Unauthorized", status=status, url=url, details=text)
            if status == 404:
                return NotFoundError("Resource not found", status=status, url=url, details=text)
            if status == 422:
                return ValidationError("Validation error", status=status, url=url, details=text)
            if status >= 500:
                return ServiceUnavailableError("Server error", status=status, url=url, details=text)

            return HttpStatusError(f"HTTP {status} Error", status=status, url=url, details=text)
        if isinstance(exc, httpx.TransportError):
            return NetworkError(f"Failed to connect: {str(exc)}", status=0, url=url)

        return HttpStatusError(f"Unexpected error: {str(exc)}", status=0, url=url)

    def _decode_body(self, response: httpx.Response, response_model: Optional[Type[BaseModel]]) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            data = response.json()
        except ValueError:
            return response.text
        if response_model:
            return response_model.model_validate(data)
        return data

    async def request(
        self,
        method: str,
        url: str,
        response_model: Optional[Type[BaseModel]] = None,
        **kwargs,
    ) -> HttpResponse:
        """Execute a single request without retries."""
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise self._map_exception(e, url) from e

        try:
            body = self._decode_body(response, response_model)
        except ModelValidationError as e:
            logger.exception(f"Response body for {url} does not match {response_model.__name__}")
            raise HttpStatusError(
                "Invalid response body",
                status=response.status_code,
                url=url,
                details=e.errors(),
            ) from e

        return HttpResponse(
            status=response.status_code,
            body=body,
            headers=dict(response.headers),
            url=str(response.url),
        )
