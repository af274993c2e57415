"""Shared HTTP plumbing for the master, volume and filer clients."""

import json
import uuid
from typing import Any, Callable, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from common.constants import REQUEST_ID_HEADER
from common.logging_config import get_logger
from seaweed.config import ServerConfig
from seaweed.exceptions import TransferFailed, TransferTimeout

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")

Payload = Union[bytes, bytearray, memoryview, str]


def as_bytes(payload: Payload) -> bytes:
    """Normalize an upload payload; text is sent as UTF-8."""
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


class HttpService:
    """
    Base for clients talking to one kind of SeaweedFS server.

    Requests are sent once. Retry/backoff and re-resolving a volume after a
    failure are left to the caller; subclass and override _request to add
    them.
    """

    def __init__(self, config: ServerConfig, session: Optional[httpx.AsyncClient] = None):
        """
        Initialize the service.

        Args:
            config: Server settings (address, protocol, default timeout)
            session: Shared AsyncClient; one is created and owned if omitted
        """
        self.config = config
        self._owns_session = session is None
        self.session = session if session is not None else httpx.AsyncClient(timeout=config.timeout)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def server_url(self, address: str, path: str = "") -> str:
        """Build a URL for a "host:port" address handed out by the master."""
        return f"{self.config.protocol}://{address}/{path.lstrip('/')}"

    def _timeout(self, timeout: Optional[float]) -> Any:
        return httpx.USE_CLIENT_DEFAULT if timeout is None else timeout

    def _tag_request(self, kwargs: dict) -> str:
        request_id = str(uuid.uuid4())
        headers = dict(kwargs.pop("headers", None) or {})
        headers[REQUEST_ID_HEADER] = request_id
        kwargs["headers"] = headers
        return request_id

    async def _request(
        self,
        method: str,
        url: str,
        timeout: Optional[float] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Send a buffered request.

        Args:
            method: HTTP method
            url: Absolute URL
            timeout: Seconds before giving up; the configured default if None
            **kwargs: Passed through to httpx

        Returns:
            Response with the body read

        Raises:
            TransferTimeout: If the request timed out
            TransferFailed: On connection or protocol errors
        """
        request_id = self._tag_request(kwargs)
        logger.debug(f"Making request: {method} {url} [request_id={request_id}]")
        try:
            response = await self.session.request(
                method, url, timeout=self._timeout(timeout), **kwargs
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Request timed out: {method} {url} [request_id={request_id}]")
            raise TransferTimeout(f"{method} {url} timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Network error: {method} {url} error={e!r} [request_id={request_id}]")
            raise TransferFailed(f"{method} {url} failed: {e}") from e

        logger.debug(
            f"Response received: {method} {url} status={response.status_code} [request_id={request_id}]"
        )
        return response

    async def _open_stream(
        self,
        method: str,
        url: str,
        timeout: Optional[float] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Send a request without reading the body.

        The caller owns the returned response and must aclose() it.
        """
        request_id = self._tag_request(kwargs)
        logger.debug(f"Opening stream: {method} {url} [request_id={request_id}]")
        request = self.session.build_request(method, url, timeout=self._timeout(timeout), **kwargs)
        try:
            response = await self.session.send(request, stream=True)
        except httpx.TimeoutException as e:
            logger.warning(f"Stream open timed out: {method} {url} [request_id={request_id}]")
            raise TransferTimeout(f"{method} {url} timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Network error: {method} {url} error={e!r} [request_id={request_id}]")
            raise TransferFailed(f"{method} {url} failed: {e}") from e

        logger.debug(
            f"Stream opened: {method} {url} status={response.status_code} [request_id={request_id}]"
        )
        return response

    @staticmethod
    def _raise_for_error(response: httpx.Response, what: str) -> None:
        """Raise TransferFailed for any status >= 400."""
        if response.status_code >= 400:
            detail = response.text[:200] if response.text else response.reason_phrase
            raise TransferFailed(
                f"{what} failed with status {response.status_code}: {detail}",
                status_code=response.status_code,
            )

    @staticmethod
    def _json(response: httpx.Response, what: str) -> Any:
        """Decode a JSON body, mapping decode errors to TransferFailed."""
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TransferFailed(
                f"{what} returned a non-JSON body (status {response.status_code})",
                status_code=response.status_code,
            ) from e

    @classmethod
    def _parse(cls, response: httpx.Response, model: Type[ModelT], what: str) -> ModelT:
        """Decode a JSON body into a response model."""
        data = cls._json(response, what)
        if isinstance(data, dict) and data.get("error"):
            raise TransferFailed(f"{what} failed: {data['error']}", status_code=response.status_code)
        return cls._validate(response, model.model_validate, data, what)

    @staticmethod
    def _validate(response: httpx.Response, build: Callable[[Any], T], data: Any, what: str) -> T:
        """Build a model from decoded JSON, mapping validation errors to TransferFailed."""
        try:
            return build(data)
        except ValidationError as e:
            raise TransferFailed(
                f"{what} returned an unexpected body: {e.error_count()} validation error(s)",
                status_code=response.status_code,
            ) from e

    async def aclose(self) -> None:
        """Close the HTTP session if this service created it."""
        if self._owns_session:
            await self.session.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
