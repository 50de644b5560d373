"""
Spreadsheet Gateway

The only component that performs network I/O against the remote store.
Every call goes to one endpoint URL; reads are GET requests with the verb in
the query string, writes are POST requests with a JSON body sent as plain
text. All responses share the ``{success, data, error}`` envelope.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .config import SheetsConfig, Sheet, Action
from .exceptions import (
    SheetsAPIError,
    NotConnectedError,
    TransportError,
    RequestFailed,
)


logger = logging.getLogger(__name__)

_REDACTED_PARAMS = {"password"}


class Envelope(BaseModel):
    """Uniform response wrapper returned by the remote store"""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    error: Optional[Any] = None


def decode_envelope(payload: Any, status_code: Optional[int] = None) -> Envelope:
    """
    Validate a parsed response body as an envelope

    Raises:
        TransportError: If the body is not an envelope-shaped object
        RequestFailed: If the envelope reports ``success: false``
    """
    if not isinstance(payload, dict):
        raise TransportError(f"Expected a JSON object, got {type(payload).__name__}",
                             status_code=status_code)
    try:
        envelope = Envelope.model_validate(payload)
    except ValidationError as e:
        raise TransportError(f"Malformed response envelope: {e.errors()[0]['msg']}",
                             status_code=status_code)

    if not envelope.success:
        error = envelope.error
        message = str(error).strip() if error is not None else ""
        raise RequestFailed(message or None, status_code=status_code)

    return envelope


def _redact(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: ("***" if k in _REDACTED_PARAMS else v) for k, v in params.items()}


class SheetsGateway:
    """Async client for the spreadsheet endpoint, no retries"""

    def __init__(self, config: SheetsConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the gateway

        Args:
            config: Endpoint configuration
            http_client: Optional pre-built client (tests pass one with a mock transport)
        """
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client

    @property
    def is_connected(self) -> bool:
        return self.config.is_connected

    async def __aenter__(self) -> 'SheetsGateway':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None and self._owns_client:
            await self._http.aclose()
            self._http = None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.config.timeout)
        return self._http

    def _ensure_connected(self) -> str:
        if not self.config.is_connected:
            raise NotConnectedError()
        return self.config.endpoint_url.strip()

    async def _send(self, method: str, **kwargs) -> Envelope:
        url = self._ensure_connected()

        try:
            response = await self._client().request(method, url, follow_redirects=True, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"{method} request failed: {e}")
            raise TransportError(f"Request failed: {e}")

        if response.status_code >= 400:
            logger.error(f"{method} request returned HTTP {response.status_code}")
            raise TransportError(f"HTTP {response.status_code} error",
                                 status_code=response.status_code,
                                 response=response.text)

        try:
            payload = response.json()
        except ValueError:
            logger.error(f"{method} response was not JSON")
            raise TransportError("Response body is not valid JSON",
                                 status_code=response.status_code,
                                 response=response.text)

        try:
            return decode_envelope(payload, status_code=response.status_code)
        except SheetsAPIError as e:
            logger.error(f"API {method} error: {e}")
            raise

    async def get(self, params: Mapping[str, Any]) -> Any:
        """
        Issue a GET request and return the envelope ``data``

        Args:
            params: Query parameters; ``None`` values are dropped

        Returns:
            The ``data`` field of the response envelope
        """
        query = {k: str(v) for k, v in params.items() if v is not None}
        logger.debug(f"GET {_redact(query)}")
        envelope = await self._send("GET", params=query)
        return envelope.data

    async def post(self, body: Mapping[str, Any]) -> Any:
        """
        Issue a POST request with a JSON body declared as plain text

        Returns:
            The envelope ``data`` field, or the whole envelope if ``data`` is absent
        """
        logger.debug(f"POST action={body.get('action')} sheet={body.get('sheet')}")
        content = json.dumps(body).encode("utf-8")
        envelope = await self._send("POST", content=content, headers=self.config.headers)
        if envelope.data is not None:
            return envelope.data
        return envelope.model_dump()

    async def health_check(self) -> bool:
        """
        Check that the endpoint answers with a well-formed envelope

        Returns:
            True if a Users listing succeeds, False otherwise
        """
        try:
            await self.get({"action": Action.GET_ALL.value, "sheet": Sheet.USERS.value})
            return True
        except SheetsAPIError as e:
            logger.error(f"Health check failed: {e}")
            return False
