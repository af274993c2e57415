"""Client facade for the master and volume servers.

Based on the SeaweedFS master and volume server HTTP APIs, normally served on
ports 9333 and 8080.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple, Union

import httpx

from common.logging_config import get_logger
from seaweed.config import MasterConfig
from seaweed.fid import parse_volume_id
from seaweed.http import Payload
from seaweed.master import MasterClient
from seaweed.models import (
    AssignResult,
    ClusterStatus,
    DeleteResult,
    DirStatus,
    LookupResult,
    VacuumResult,
    VolumeLocation,
    VolumeServerStatus,
    WriteResult,
)
from seaweed.params import (
    AssignParams,
    GrowParams,
    LookupParams,
    VolumeReadParams,
    VolumeWriteParams,
)
from seaweed.resolver import LocationResolver
from seaweed.streaming import ObjectStream
from seaweed.volume import VolumeTransfer

logger = get_logger(__name__)


class SeaweedClient:
    """
    Entry point for object storage through the master and volume servers.

    Operations on an existing fid look up its volume server through the
    master unless volume_url is given. Lookups are never cached.

    Use as an async context manager to close the HTTP session:

        async with SeaweedClient(MasterConfig(host="master")) as client:
            assigned = await client.assign()
            await client.write(assigned.fid, assigned.url, b"CONTENTS", "f.txt")
    """

    def __init__(self, config: Optional[MasterConfig] = None, session: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client.

        Args:
            config: Master settings; defaults to http://localhost:9333
            session: Shared AsyncClient (e.g. with a custom transport)
        """
        self.config = config or MasterConfig()
        self._owns_session = session is None
        self.session = session if session is not None else httpx.AsyncClient(timeout=self.config.timeout)
        self.master = MasterClient(self.config, self.session)
        self.resolver = LocationResolver(self.master)
        self.volumes = VolumeTransfer(self.resolver, self.config, self.session)
        logger.info(f"Initialized SeaweedClient [master={self.config.base_url}]")

    @staticmethod
    def get_volume_id(fid: str) -> int:
        """Volume id of a fid, i.e. the part before the comma."""
        return parse_volume_id(fid)

    async def assign(self, params: Optional[AssignParams] = None, timeout: Optional[float] = None) -> AssignResult:
        return await self.master.assign(params, timeout=timeout)

    async def lookup(
        self,
        volume: Union[int, LookupParams],
        timeout: Optional[float] = None
    ) -> LookupResult:
        """Raw master lookup; see resolve() for the location list."""
        params = volume if isinstance(volume, LookupParams) else LookupParams(volume_id=volume)
        return await self.master.lookup(params, timeout=timeout)

    async def resolve(self, volume_id: int, timeout: Optional[float] = None) -> list[VolumeLocation]:
        return await self.resolver.resolve(volume_id, timeout=timeout)

    async def write(
        self,
        fid: str,
        volume_url: str,
        payload: Payload,
        filename: str,
        params: Optional[VolumeWriteParams] = None,
        timeout: Optional[float] = None
    ) -> WriteResult:
        return await self.volumes.write(fid, volume_url, payload, filename, params=params, timeout=timeout)

    async def upload(
        self,
        payload: Payload,
        filename: str,
        assign_params: Optional[AssignParams] = None,
        write_params: Optional[VolumeWriteParams] = None,
        timeout: Optional[float] = None
    ) -> Tuple[AssignResult, WriteResult]:
        """
        Assign a new fid and write the payload to it.

        Returns:
            Tuple of (assignment, write result); the fid is assignment.fid
        """
        assigned = await self.assign(assign_params, timeout=timeout)
        written = await self.write(
            assigned.fid, assigned.url, payload, filename, params=write_params, timeout=timeout
        )
        return assigned, written

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
        return await self.volumes.update(
            fid, payload, filename, volume_url=volume_url, public=public, params=params, timeout=timeout
        )

    async def delete(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        timeout: Optional[float] = None
    ) -> DeleteResult:
        return await self.volumes.delete(fid, volume_url=volume_url, public=public, timeout=timeout)

    async def get(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        params: Optional[VolumeReadParams] = None,
        timeout: Optional[float] = None
    ) -> bytes:
        return await self.volumes.get(fid, volume_url=volume_url, public=public, params=params, timeout=timeout)

    async def get_stream(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        params: Optional[VolumeReadParams] = None,
        timeout: Optional[float] = None,
        chunk_size: Optional[int] = None
    ) -> ObjectStream:
        return await self.volumes.get_stream(
            fid,
            volume_url=volume_url,
            public=public,
            params=params,
            timeout=timeout,
            chunk_size=chunk_size,
        )

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
        async with self.volumes.stream_object(
            fid,
            volume_url=volume_url,
            public=public,
            params=params,
            timeout=timeout,
            chunk_size=chunk_size,
        ) as stream:
            yield stream

    async def vacuum(self, threshold: float = 0.3, timeout: Optional[float] = None) -> VacuumResult:
        return await self.master.vacuum(threshold, timeout=timeout)

    async def pre_allocate_volumes(self, params: Optional[GrowParams] = None, timeout: Optional[float] = None) -> dict:
        return await self.master.pre_allocate_volumes(params, timeout=timeout)

    async def delete_collection(self, collection: str, timeout: Optional[float] = None) -> dict:
        return await self.master.delete_collection(collection, timeout=timeout)

    async def system_status(self, timeout: Optional[float] = None) -> ClusterStatus:
        return await self.master.system_status(timeout=timeout)

    async def system_health(self, timeout: Optional[float] = None) -> int:
        return await self.master.system_health(timeout=timeout)

    async def volume_statuses(self, timeout: Optional[float] = None) -> DirStatus:
        return await self.master.volume_statuses(timeout=timeout)

    async def volume_server_status(self, server: str, timeout: Optional[float] = None) -> VolumeServerStatus:
        return await self.volumes.server_status(server, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_session:
            await self.session.aclose()

    async def __aenter__(self) -> "SeaweedClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
