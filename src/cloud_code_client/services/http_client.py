import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from cloud_code_client import __version__
from cloud_code_client.constants.http_constants import ContentTypes, HttpHeaders
from cloud_code_client.exceptions.base_exception import CloudCodeExceptionBase
from cloud_code_client.exceptions.exceptions import (
    ConnectionFailedException,
    InvalidResponseException,
    MasterKeyRequiredException,
    exception_from_response,
)
from cloud_code_client.services.configuration_service import ConfigurationService


# Failures raised before the request reached the server; safe to retry for any method
UNSENT_REQUEST_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)


class HttpClientService:
    """
    Async HTTP transport for the backend REST API with connection pooling and
    retry logic for transport failures.

    GET requests are retried on any transport error and on 5xx responses
    without a structured body. POST requests may already have run on the
    server, so they are only retried when the connection was never made.

    Structured errors reported by the server are raised as the matching
    ``CloudCodeExceptionBase`` subclass and are never retried.
    """
    def __init__(self, config_service: ConfigurationService, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.logger = logging.getLogger(__name__)
        self._config = config_service
        self._http_config = config_service.get_http_config()
        self._closed = False
        self._client = httpx.AsyncClient(
            base_url=config_service.get_server_url(),
            timeout=httpx.Timeout(self._http_config.timeout, connect=self._http_config.connect_timeout),
            limits=httpx.Limits(
                max_keepalive_connections=20,
                max_connections=self._http_config.max_connections,
                keepalive_expiry=30.0
            ),
            follow_redirects=True,
            transport=transport,
            event_hooks={
                "request": [self._log_request],
                "response": [self._log_response]
            }
        )

    async def _log_request(self, request: httpx.Request):
        self.logger.debug(f"Request: {request.method} {request.url}")

    async def _log_response(self, response: httpx.Response):
        request = response.request
        self.logger.debug(
            f"Response: {request.method} {request.url} - Status: {response.status_code}"
        )

    @property
    def config_service(self) -> ConfigurationService:
        return self._config

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        if self._closed:
            return
        await self._client.aclose()
        self._closed = True
        self.logger.debug("HTTP client closed")

    def _get_headers(self, use_master_key: bool, session_token: Optional[str]) -> Dict[str, str]:
        """Create the application, key and session headers for a request."""
        headers = {
            HttpHeaders.APPLICATION_ID: self._config.get_application_id(),
            HttpHeaders.CLIENT_VERSION: f"py{__version__}",
            HttpHeaders.USER_AGENT: f"cloud-code-client/{__version__}",
        }
        rest_api_key = self._config.get_rest_api_key()
        if rest_api_key:
            headers[HttpHeaders.REST_API_KEY] = rest_api_key
        if use_master_key:
            master_key = self._config.get_master_key()
            if not master_key:
                raise MasterKeyRequiredException("This operation")
            headers[HttpHeaders.MASTER_KEY] = master_key
        if session_token:
            headers[HttpHeaders.SESSION_TOKEN] = session_token
        return headers

    def _backoff(self, attempt: int, base: int = 2, cap: int = 10) -> float:
        return min(base ** attempt, cap)

    async def _make_request(
        self,
        method: str,
        path: str,
        use_master_key: bool = False,
        session_token: Optional[str] = None,
        idempotent: bool = False,
        **kwargs
    ) -> httpx.Response:
        """Common request handling with retry logic."""
        headers = self._get_headers(use_master_key, session_token)
        headers.update(kwargs.pop('headers', {}))

        max_retries = self._http_config.max_retries
        for attempt in range(max_retries):
            try:
                response = await self._client.request(method, path, headers=headers, **kwargs)
            except httpx.RequestError as e:
                retryable = idempotent or isinstance(e, UNSENT_REQUEST_ERRORS)
                if retryable and attempt < max_retries - 1:
                    wait_time = self._backoff(attempt)
                    self.logger.warning(
                        f"Request error: {e}, retrying in {wait_time}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise ConnectionFailedException(f"Request to {path} failed: {e}") from e

            if response.is_success:
                return response

            error = self._error_from_response(response)
            if error is None and idempotent and response.status_code >= 500 and attempt < max_retries - 1:
                wait_time = self._backoff(attempt)
                self.logger.warning(
                    f"Request failed with {response.status_code}, "
                    f"retrying in {wait_time}s (attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(wait_time)
                continue

            if error is None:
                error = ConnectionFailedException(
                    f"{method.upper()} {path} failed with HTTP {response.status_code}: "
                    f"{response.reason_phrase}"
                )
            self.logger.debug(f"Server error for {method.upper()} {path}: {error.to_telemetry_string()}")
            raise error

    def _error_from_response(self, response: httpx.Response) -> Optional[CloudCodeExceptionBase]:
        """Map a structured ``{code, error}`` body; None when the body has no such shape."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict) or "error" not in body:
            return None
        code = body.get("code")
        return exception_from_response(code if isinstance(code, int) else None, str(body.get("error")))

    @staticmethod
    def decode_json(response: httpx.Response) -> Any:
        """Parse a successful response body; an empty body decodes to an empty dict."""
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseException(
                f"Invalid JSON in response to {response.request.method} {response.request.url}"
            ) from e

    async def get(self, path: str, use_master_key: bool = False, session_token: Optional[str] = None) -> httpx.Response:
        """Performs a GET request to the specified path."""
        return await self._make_request('get', path, use_master_key, session_token, idempotent=True)

    async def post(
        self,
        path: str,
        content: Any,
        use_master_key: bool = False,
        session_token: Optional[str] = None
    ) -> httpx.Response:
        """Performs a POST request with a JSON body to the specified path."""
        return await self._make_request(
            'post',
            path,
            use_master_key,
            session_token,
            json=content,
            headers={HttpHeaders.CONTENT_TYPE: ContentTypes.JSON}
        )
