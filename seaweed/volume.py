"""Transfers against volume servers: write, update, delete and get.

Each operation is an independent round trip. Concurrent writes to the same
fid are ordered by the cluster (last write wins), not by this client, and
failed writes are not rolled back.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from common.constants import UPLOAD_FORM_FIELD
from common.logging_config import get_logger
from seaweed.config import MasterConfig, ServerConfig
from seaweed.exceptions import DeleteFailed, NoFileFound, TransferFailed
from seaweed.http import HttpService, Payload, as_bytes
from seaweed.models import DeleteResult, VolumeServerStatus, WriteResult
from seaweed.params import VolumeReadParams, VolumeWriteParams, to_query
from seaweed.resolver import LocationResolver
from seaweed.streaming import ObjectStream

logger = get_logger(__name__)


class VolumeTransfer(HttpService):
    """
    Executes object transfers against volume servers.

    Operations that take an optional volume_url resolve it through the
    master only when it is not supplied.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        config: Optional[ServerConfig] = None,
        session: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(config or MasterConfig(), session)
        self.resolver = resolver

    async def write(
        self,
        fid: str,
        volume_url: str,
        payload: Payload,
        filename: str,
        params: Optional[VolumeWriteParams] = None,
        timeout: Optional[float] = None
    ) -> WriteResult:
        """
        Upload an object to the given volume server.

        Args:
            fid: File id from an assignment
            volume_url: "host:port" of the volume server (AssignResult.url)
            payload: Object content
            filename: Name stored with the object
            params: Optional upload parameters
            timeout: Request timeout override in seconds

        Returns:
            WriteResult with name, size and eTag

        Raises:
            TransferFailed: On transport errors or an unparseable response
        """
        url = self.server_url(volume_url, fid)
        data = as_bytes(payload)
        logger.info(f"Writing fid={fid} filename={filename} size={len(data)} [volume={volume_url}]")
        response = await self._request(
            "POST",
            url,
            files={UPLOAD_FORM_FIELD: (filename, data)},
            params=to_query(params),
            timeout=timeout,
        )
        self._raise_for_error(response, f"Write {fid}")
        result = self._parse(response, WriteResult, f"Write {fid}")
        logger.debug(f"Write complete fid={fid} size={result.size} etag={result.etag}")
        return result

    async def update(
        self,
        fid: str,
        payload: Payload,
        filename: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        params: Optional[VolumeWriteParams] = None,
        timeout: Optional[float] = None
    ) -> WriteResult:
        """
        Overwrite an existing object, resolving its server if needed.

        Raises:
            MalformedIdentifier: If fid cannot be parsed
            NoVolumeFound: If the volume has no location
            TransferFailed: On transport errors or an unparseable response
        """
        volume_url = await self.resolver.volume_url(fid, volume_url, public, timeout=timeout)
        return await self.write(fid, volume_url, payload, filename, params=params, timeout=timeout)

    async def delete(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        timeout: Optional[float] = None
    ) -> DeleteResult:
        """
        Delete an object.

        Returns:
            DeleteResult with the freed size

        Raises:
            NoFileFound: If the server answers 404
            DeleteFailed: If the server answers success without a confirmation body
            TransferFailed: On other error statuses or transport errors
        """
        volume_url = await self.resolver.volume_url(fid, volume_url, public, timeout=timeout)
        response = await self._request("DELETE", self.server_url(volume_url, fid), timeout=timeout)

        if response.status_code == 404:
            raise NoFileFound(fid)
        self._raise_for_error(response, f"Delete {fid}")

        if not response.content.strip():
            logger.warning(f"Delete returned an empty body [fid={fid}]")
            raise DeleteFailed(fid)
        body = self._json(response, f"Delete {fid}")
        if not body:
            logger.warning(f"Delete returned a falsy body [fid={fid} body={body!r}]")
            raise DeleteFailed(fid)
        if isinstance(body, dict) and body.get("error"):
            raise TransferFailed(f"Delete {fid} failed: {body['error']}", status_code=response.status_code)

        result = self._parse(response, DeleteResult, f"Delete {fid}")
        logger.info(f"Deleted fid={fid} size={result.size}")
        return result

    async def _open(
        self,
        fid: str,
        volume_url: Optional[str],
        public: bool,
        params: Optional[VolumeReadParams],
        timeout: Optional[float]
    ) -> httpx.Response:
        volume_url = await self.resolver.volume_url(fid, volume_url, public, timeout=timeout)
        response = await self._open_stream(
            "GET", self.server_url(volume_url, fid), params=to_query(params), timeout=timeout
        )
        if response.status_code < 400:
            return response

        await response.aclose()
        if response.status_code == 404:
            raise NoFileFound(fid)
        raise TransferFailed(
            f"Get {fid} failed with status {response.status_code}",
            status_code=response.status_code,
        )

    async def get(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        params: Optional[VolumeReadParams] = None,
        timeout: Optional[float] = None
    ) -> bytes:
        """
        Download an object into memory.

        Raises:
            NoFileFound: If the server answers 404
            TransferFailed: On other error statuses or transport errors
        """
        stream = ObjectStream(await self._open(fid, volume_url, public, params, timeout), fid)
        async with stream:
            data = await stream.read()
        logger.debug(f"Read fid={fid} size={len(data)}")
        return data

    async def get_stream(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        params: Optional[VolumeReadParams] = None,
        timeout: Optional[float] = None,
        chunk_size: Optional[int] = None
    ) -> ObjectStream:
        """
        Open an object for streamed reading.

        The status is checked here, so a missing object raises before any
        chunk is produced. The stream must be entered with ``async with``
        before iterating; prefer stream_object(), which does that.

        Returns:
            ObjectStream owning the open connection

        Raises:
            NoFileFound: If the server answers 404
            TransferFailed: On other error statuses or transport errors
        """
        response = await self._open(fid, volume_url, public, params, timeout)
        if chunk_size is None:
            return ObjectStream(response, fid)
        return ObjectStream(response, fid, chunk_size=chunk_size)

    @asynccontextmanager
    async def stream_object(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        params: Optional[VolumeReadParams] = None,
        timeout: Optional[float] = None,
        chunk_size: Optional[int] = None
    ) -> AsyncIterator[ObjectStream]:
        """
        Open an object for streamed reading within an ``async with`` block.

        The connection is released when the block is left, including after a
        break or an exception.
        """
        stream = await self.get_stream(fid, volume_url, public, params, timeout, chunk_size)
        async with stream:
            yield stream

    async def server_status(self, volume_url: str, timeout: Optional[float] = None) -> VolumeServerStatus:
        """Disk and volume status of one volume server."""
        response = await self._request("GET", self.server_url(volume_url, "status"), timeout=timeout)
        self._raise_for_error(response, f"Volume server status {volume_url}")
        return self._parse(response, VolumeServerStatus, f"Volume server status {volume_url}")
