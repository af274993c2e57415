"""Volume location resolution via the master.

Volumes can migrate between servers, so nothing here is cached: every call
asks the master again and a location is only trusted for the operation that
looked it up.
"""

from typing import List, Optional

from common.logging_config import get_logger
from seaweed.exceptions import NoVolumeFound
from seaweed.fid import parse_volume_id
from seaweed.master import MasterClient
from seaweed.models import VolumeLocation
from seaweed.params import LookupParams

logger = get_logger(__name__)


class LocationResolver:
    """Maps volume ids and file ids to volume server addresses."""

    def __init__(self, master: MasterClient):
        self.master = master

    async def resolve(self, volume_id: int, timeout: Optional[float] = None) -> List[VolumeLocation]:
        """
        Find every server currently hosting a volume.

        Args:
            volume_id: Numeric volume id
            timeout: Request timeout override in seconds

        Returns:
            Non-empty list of locations, in the master's order

        Raises:
            NoVolumeFound: If the lookup fails or returns no locations
        """
        result = await self.master.lookup(LookupParams(volume_id=volume_id), timeout=timeout)
        if not result.locations:
            logger.warning(f"Lookup returned no locations [volume_id={volume_id}]")
            raise NoVolumeFound(volume_id)
        logger.debug(f"Resolved volume_id={volume_id} to {len(result.locations)} location(s)")
        return result.locations

    async def volume_url(
        self,
        fid: str,
        volume_url: Optional[str] = None,
        public: bool = False,
        timeout: Optional[float] = None
    ) -> str:
        """
        Pick the volume server address for a file id.

        An explicit volume_url always wins and skips the lookup. Otherwise the
        first location is used, its publicUrl when public is set.

        Raises:
            MalformedIdentifier: If fid cannot be parsed
            NoVolumeFound: If the volume has no location
        """
        if volume_url:
            return volume_url
        volume_id = parse_volume_id(fid)
        locations = await self.resolve(volume_id, timeout=timeout)
        location = locations[0]
        return location.public_url if public else location.url
