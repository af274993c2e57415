"""Streamed object reads."""

from typing import AsyncIterator, Optional

import httpx

from common.constants import STREAM_CHUNK_SIZE
from common.logging_config import get_logger
from seaweed.exceptions import TransferFailed, TransferTimeout

logger = get_logger(__name__)


class ObjectStream:
    """
    Lazy, finite, single-use async iterator over an object's bytes.

    Wraps an open response whose status has already been checked. The
    stream must be entered with ``async with`` before it is iterated, so the
    connection is always released when the block is left. It is also
    released when the body is exhausted, when reading fails and on aclose():

        async with client.stream_object(fid) as stream:
            async for chunk in stream:
                ...
    """

    def __init__(self, response: httpx.Response, name: str, chunk_size: Optional[int] = STREAM_CHUNK_SIZE):
        self._response = response
        self._chunks: Optional[AsyncIterator[bytes]] = None
        self._started = False
        self._entered = False
        self._closed = False
        self.name = name
        self.chunk_size = chunk_size

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def content_length(self) -> Optional[int]:
        value = self._response.headers.get("content-length")
        return int(value) if value is not None and value.isdigit() else None

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "ObjectStream":
        if not self._entered:
            raise RuntimeError(f"Stream for {self.name} must be entered with 'async with' before iterating")
        if self._started:
            raise RuntimeError(f"Stream for {self.name} has already been consumed")
        self._started = True
        self._chunks = self._response.aiter_bytes(self.chunk_size)
        return self

    async def __anext__(self) -> bytes:
        if self._closed or self._chunks is None:
            raise StopAsyncIteration
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except httpx.TimeoutException as e:
            await self.aclose()
            raise TransferTimeout(f"Reading {self.name} timed out") from e
        except httpx.HTTPError as e:
            await self.aclose()
            raise TransferFailed(f"Reading {self.name} failed: {e}") from e
        except BaseException:
            await self.aclose()
            raise

    async def read(self) -> bytes:
        """Consume the rest of the stream into memory."""
        return b"".join([chunk async for chunk in self])

    async def aclose(self) -> None:
        """Release the underlying connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        logger.debug(f"Stream closed [name={self.name}]")

    async def __aenter__(self) -> "ObjectStream":
        self._entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
