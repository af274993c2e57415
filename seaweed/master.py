"""Client for the master server API (assignment, lookup, maintenance)."""

from typing import Optional

import httpx

from common.logging_config import get_logger
from seaweed.config import MasterConfig
from seaweed.exceptions import NoVolumeFound
from seaweed.http import HttpService
from seaweed.models import (
    AssignResult,
    ClusterStatus,
    DirStatus,
    LookupResult,
    VacuumResult,
)
from seaweed.params import AssignParams, GrowParams, LookupParams, to_query

logger = get_logger(__name__)


class MasterClient(HttpService):
    """HTTP client for the master server (normally on port 9333)."""

    def __init__(self, config: Optional[MasterConfig] = None, session: Optional[httpx.AsyncClient] = None):
        super().__init__(config or MasterConfig(), session)

    def _master_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def assign(
        self,
        params: Optional[AssignParams] = None,
        timeout: Optional[float] = None
    ) -> AssignResult:
        """
        Ask the master for a new file id and the volume server to write it to.

        Args:
            params: Optional allocation parameters (count, collection, ...)
            timeout: Request timeout override in seconds

        Returns:
            AssignResult with fid, url and publicUrl

        Raises:
            TransferFailed: If the master refuses or the response is unusable
        """
        response = await self._request(
            "GET", self._master_url("/dir/assign"), params=to_query(params), timeout=timeout
        )
        self._raise_for_error(response, "Assign")
        result = self._parse(response, AssignResult, "Assign")
        logger.info(f"Assigned fid={result.fid} url={result.url} count={result.count}")
        return result

    async def lookup(self, params: LookupParams, timeout: Optional[float] = None) -> LookupResult:
        """
        Look up where a volume currently lives.

        Args:
            params: Lookup parameters; volume_id is required
            timeout: Request timeout override in seconds

        Returns:
            LookupResult with every known location

        Raises:
            NoVolumeFound: If the master answers with a non-success status
        """
        query = to_query(params)
        query["volumeId"] = str(params.volume_id)
        response = await self._request(
            "GET", self._master_url("/dir/lookup"), params=query, timeout=timeout
        )
        if response.status_code != 200:
            logger.warning(f"Lookup miss: volume_id={params.volume_id} status={response.status_code}")
            raise NoVolumeFound(params.volume_id)
        return self._parse(response, LookupResult, "Lookup")

    async def vacuum(self, threshold: float = 0.3, timeout: Optional[float] = None) -> VacuumResult:
        """
        Force garbage collection of volumes above a garbage ratio.

        Volumes are compacted into a copy holding only live records, which
        then replaces the original.

        Args:
            threshold: Empty space ratio that triggers compaction
            timeout: Request timeout override in seconds
        """
        response = await self._request(
            "GET",
            self._master_url("/vol/vacuum"),
            params={"garbageThreshold": str(threshold)},
            timeout=timeout,
        )
        self._raise_for_error(response, "Vacuum")
        return self._parse(response, VacuumResult, "Vacuum")

    async def pre_allocate_volumes(
        self,
        params: Optional[GrowParams] = None,
        timeout: Optional[float] = None
    ) -> dict:
        """
        Grow writable volumes ahead of time.

        One volume serves one write at a time, so pre-allocating raises write
        concurrency.
        """
        response = await self._request(
            "GET", self._master_url("/vol/grow"), params=to_query(params), timeout=timeout
        )
        self._raise_for_error(response, "Volume grow")
        return self._json(response, "Volume grow")

    async def delete_collection(self, collection: str, timeout: Optional[float] = None) -> dict:
        """Delete a collection and all its volumes."""
        response = await self._request(
            "POST",
            self._master_url("/col/delete"),
            params={"collection": collection},
            timeout=timeout,
        )
        self._raise_for_error(response, f"Delete collection {collection}")
        logger.info(f"Deleted collection: {collection}")
        if not response.content:
            return {}
        return self._json(response, f"Delete collection {collection}")

    async def system_status(self, timeout: Optional[float] = None) -> ClusterStatus:
        response = await self._request("GET", self._master_url("/cluster/status"), timeout=timeout)
        self._raise_for_error(response, "Cluster status")
        return self._parse(response, ClusterStatus, "Cluster status")

    async def system_health(self, timeout: Optional[float] = None) -> int:
        """Return the HTTP status of /cluster/healthz (200 when healthy)."""
        response = await self._request("GET", self._master_url("/cluster/healthz"), timeout=timeout)
        return response.status_code

    async def volume_statuses(self, timeout: Optional[float] = None) -> DirStatus:
        """Topology and writable volumes as seen by the master."""
        response = await self._request("GET", self._master_url("/dir/status"), timeout=timeout)
        self._raise_for_error(response, "Dir status")
        return self._parse(response, DirStatus, "Dir status")
