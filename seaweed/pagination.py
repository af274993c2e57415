"""Cursor-driven pagination over filer directory listings."""

from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Optional

from common.constants import DEFAULT_LIST_LIMIT
from common.logging_config import get_logger
from seaweed.models import FilerEntry, ListFilesResponse

logger = get_logger(__name__)


@dataclass
class ListingCursor:
    """
    Position in a directory listing, advanced in place page by page.

    Attributes:
        path: Directory on the filer
        last_file_name: Name of the last entry already seen ("" to start)
        limit: Page size requested from the filer
        name_pattern: Case sensitive include glob (* and ?)
        name_pattern_exclude: Case sensitive exclude glob (* and ?)
    """
    path: str
    last_file_name: str = ""
    limit: int = DEFAULT_LIST_LIMIT
    name_pattern: Optional[str] = None
    name_pattern_exclude: Optional[str] = None

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"limit must be positive, got {self.limit}")

    def to_query(self) -> Dict[str, str]:
        query = {"limit": str(self.limit)}
        if self.last_file_name:
            query["lastFileName"] = self.last_file_name
        if self.name_pattern:
            query["namePattern"] = self.name_pattern
        if self.name_pattern_exclude:
            query["namePatternExclude"] = self.name_pattern_exclude
        return query


FetchPage = Callable[[ListingCursor], Awaitable[ListFilesResponse]]


async def paginate(fetch_page: FetchPage, cursor: ListingCursor) -> AsyncIterator[List[FilerEntry]]:
    """
    Yield batches of entries until the listing is exhausted.

    Entries are assumed sorted by name. After each page the cursor moves to
    the last entry returned. A full page (at least limit entries) means there
    may be more; a short page ends the listing. Empty pages are not yielded.

    Args:
        fetch_page: Coroutine function returning one page for the cursor
        cursor: Listing position, mutated as pages are consumed

    Yields:
        Lists of entries, one per page
    """
    pages = 0
    while True:
        page = await fetch_page(cursor)
        pages += 1
        entries = page.entries
        logger.debug(
            f"Listing page {pages} [path={cursor.path} after={cursor.last_file_name!r} entries={len(entries)}]"
        )

        if entries:
            cursor.last_file_name = entries[-1].name
            yield entries

        if len(entries) < cursor.limit:
            break

    logger.debug(f"Listing finished [path={cursor.path} pages={pages}]")
