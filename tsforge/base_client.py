"""HTTP request primitive for the database REST API."""

import logging
import time
from typing import Optional, Dict, Any, Callable, TypeVar, Union

import httpx

from .config import settings
from .errors import TransportError, NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar('T')

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class BaseClient:
    """Client for the database REST API.

    Wraps an ``httpx.Client`` and retries transient failures (connect
    errors, timeouts, 429 and 5xx responses) with exponential backoff.
    Everything else is raised at once as a ``ForgeError`` subclass.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.default_headers = {
            "Content-Type": "application/json",
            **settings.default_headers,
            **(default_headers or {}),
        }
        self.timeout = timeout if timeout is not None else settings.timeout
        self.max_retries = max(1, max_retries if max_retries is not None else settings.max_retries)
        self.backoff = backoff if backoff is not None else settings.retry_backoff
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self.default_headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _retry_with_backoff(self, operation: Callable[[], T]) -> T:
        """Execute operation, retrying transient failures.

        Makes at most ``max_retries`` attempts, sleeping ``backoff``,
        ``2 * backoff``, ``4 * backoff``... seconds between them.

        Raises:
            The last exception if all attempts fail
        """
        last_exception: Optional[Exception] = None
        delay = self.backoff

        for attempt in range(1, self.max_retries + 1):
            try:
                return operation()
            except httpx.HTTPStatusError as e:
                if e.response.status_code not in RETRYABLE_STATUS_CODES:
                    raise
                last_exception = e
            except (httpx.TransportError, httpx.TimeoutException) as e:
                last_exception = e

            if attempt < self.max_retries:
                logger.debug(
                    "Attempt %d/%d failed (%s), retrying in %.2fs",
                    attempt, self.max_retries, last_exception, delay,
                )
                time.sleep(delay)
                delay *= 2  # Exponential backoff

        if last_exception:
            raise last_exception
        raise RuntimeError("Retry operation failed without exception")

    def request(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send a request and return the parsed JSON body.

        Args:
            path: Path relative to the base URL
            method: HTTP method
            params: Query parameters; ``None`` values are dropped
            body: JSON-serializable request body
            headers: Extra headers for this request only
            timeout: Per-request timeout in seconds

        Returns:
            The decoded JSON body, the raw text for non-JSON bodies, or None
            for an empty body

        Raises:
            NotFoundError: The backend answered 404
            TransportError: Any other failure, after retries where allowed
        """
        query = {k: _param_value(v) for k, v in (params or {}).items() if v is not None}

        def do_request() -> httpx.Response:
            response = self.client.request(
                method,
                path,
                params=query or None,
                json=body,
                headers=headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
            response.raise_for_status()
            return response

        logger.debug("%s %s params=%s", method, path, query)
        try:
            response = self._retry_with_backoff(do_request)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            details = _error_body(e.response)
            if status == 404:
                raise NotFoundError(f"Not found: {method} {path}", details=details) from e
            raise TransportError(
                f"HTTP error: {status} {e.response.reason_phrase}",
                code="HTTP_ERROR",
                status=status,
                details=details,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {method} {path}", code="TIMEOUT", details=str(e)) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}", code="REQUEST_FAILED", details=str(e)) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        """HTTP GET request."""
        return self.request(path, method="GET", params=params, **kwargs)

    def post(self, path: str, body: Any = None, **kwargs) -> Any:
        """HTTP POST request."""
        return self.request(path, method="POST", body=body, **kwargs)

    def put(self, path: str, body: Any = None, **kwargs) -> Any:
        """HTTP PUT request."""
        return self.request(path, method="PUT", body=body, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        """HTTP DELETE request."""
        return self.request(path, method="DELETE", **kwargs)


def create_base_client(base_url_or_client: Union[str, BaseClient, None] = None) -> BaseClient:
    """Return the given client, or build one for a URL (default: settings).

    Any object with a compatible ``request`` method is accepted as a client.
    """
    if base_url_or_client is None or isinstance(base_url_or_client, str):
        return BaseClient(base_url=base_url_or_client)
    return base_url_or_client
