"""Client for the filer server API (path-based files, listings, tags)."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Mapping, Optional

import httpx

from common.constants import DEFAULT_LIST_LIMIT, UPLOAD_FORM_FIELD
from common.logging_config import get_logger
from seaweed.config import FilerConfig
from seaweed.exceptions import NoFileFound, TransferFailed
from seaweed.http import HttpService, Payload, as_bytes
from seaweed.models import FilerEntry, ListFilesResponse, WriteResult, entry_from_json
from seaweed.pagination import ListingCursor, paginate
from seaweed.params import FilerDeleteParams, FilerReadParams, FilerWriteParams, to_query
from seaweed.streaming import ObjectStream
from seaweed.tags import validate_tag_names, validate_tags

logger = get_logger(__name__)

JSON_HEADERS = {"Accept": "application/json"}


class FilerClient(HttpService):
    """HTTP client for the filer (normally on port 8888)."""

    def __init__(self, config: Optional[FilerConfig] = None, session: Optional[httpx.AsyncClient] = None):
        super().__init__(config or FilerConfig(), session)

    def _path_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _check(self, response: httpx.Response, path: str, what: str) -> None:
        if response.status_code == 404:
            raise NoFileFound(path)
        self._raise_for_error(response, f"{what} {path}")

    async def _upload(
        self,
        method: str,
        path: str,
        payload: Payload,
        filename: str,
        params: Optional[FilerWriteParams],
        timeout: Optional[float]
    ) -> WriteResult:
        data = as_bytes(payload)
        logger.info(f"Uploading to filer: {method} {path} filename={filename} size={len(data)}")
        response = await self._request(
            method,
            self._path_url(path),
            files={UPLOAD_FORM_FIELD: (filename, data)},
            params=to_query(params),
            timeout=timeout,
        )
        self._raise_for_error(response, f"Upload {path}")
        return self._parse(response, WriteResult, f"Upload {path}")

    async def send(
        self,
        path: str,
        payload: Payload,
        filename: str,
        params: Optional[FilerWriteParams] = None,
        timeout: Optional[float] = None
    ) -> WriteResult:
        """
        Upload a file to a path with POST.

        Behaviour can be changed through params, e.g. op="append" appends the
        payload to the existing file.

        Args:
            path: Target path on the filer (a trailing "/" keeps filename)
            payload: File content
            filename: Name sent in the multipart form
            params: Optional upload parameters
            timeout: Request timeout override in seconds

        Returns:
            WriteResult with name and size
        """
        return await self._upload("POST", path, payload, filename, params, timeout)

    async def put(
        self,
        path: str,
        payload: Payload,
        filename: str,
        params: Optional[FilerWriteParams] = None,
        timeout: Optional[float] = None
    ) -> WriteResult:
        """Same as send() but with PUT."""
        return await self._upload("PUT", path, payload, filename, params, timeout)

    async def _open_file(self, path: str, attachment: bool, timeout: Optional[float]) -> httpx.Response:
        params = FilerReadParams(response_content_disposition="attachment" if attachment else None)
        response = await self._open_stream(
            "GET", self._path_url(path), params=to_query(params), timeout=timeout
        )
        if response.status_code >= 400:
            await response.aread()
            await response.aclose()
            self._check(response, path, "Get")
        return response

    async def get_file(self, path: str, attachment: bool = False, timeout: Optional[float] = None) -> bytes:
        """
        Download a file into memory.

        Raises:
            NoFileFound: If the path does not exist
        """
        stream = ObjectStream(await self._open_file(path, attachment, timeout), path)
        async with stream:
            return await stream.read()

    async def get_file_stream(
        self,
        path: str,
        attachment: bool = False,
        timeout: Optional[float] = None
    ) -> ObjectStream:
        """Open a file for streamed reading; status is checked before returning.

        The stream must be entered with ``async with`` before iterating.
        """
        return ObjectStream(await self._open_file(path, attachment, timeout), path)

    @asynccontextmanager
    async def stream_file(
        self,
        path: str,
        attachment: bool = False,
        timeout: Optional[float] = None
    ) -> AsyncIterator[ObjectStream]:
        """Open a file for streamed reading; the connection is released when the block is left."""
        async with await self.get_file_stream(path, attachment, timeout) as stream:
            yield stream

    async def get_metadata(self, path: str, timeout: Optional[float] = None) -> FilerEntry:
        """
        Fetch metadata for a file or directory.

        Returns:
            FileEntry or DirectoryEntry

        Raises:
            NoFileFound: If the path does not exist
        """
        response = await self._request(
            "GET",
            self._path_url(path),
            params=to_query(FilerReadParams(metadata=True)),
            headers=JSON_HEADERS,
            timeout=timeout,
        )
        self._check(response, path, "Metadata")
        data = self._json(response, f"Metadata {path}")
        if not isinstance(data, dict):
            raise TransferFailed(f"Metadata {path} returned {type(data).__name__}, expected an object")
        return self._validate(response, entry_from_json, data, f"Metadata {path}")

    async def _fetch_page(self, cursor: ListingCursor, timeout: Optional[float] = None) -> ListFilesResponse:
        response = await self._request(
            "GET",
            self._path_url(cursor.path),
            params=cursor.to_query(),
            headers=JSON_HEADERS,
            timeout=timeout,
        )
        self._check(response, cursor.path, "List")
        data = self._json(response, f"List {cursor.path}")
        if not isinstance(data, dict):
            raise TransferFailed(f"List {cursor.path} returned {type(data).__name__}, expected an object")
        return self._validate(response, ListFilesResponse.from_json, data, f"List {cursor.path}")

    def iter_batches(
        self,
        cursor: ListingCursor,
        timeout: Optional[float] = None
    ) -> AsyncIterator[List[FilerEntry]]:
        """
        Page through a directory, yielding one batch of entries per request.

        The cursor is advanced in place and the iterator cannot be restarted.
        """
        async def fetch_page(current: ListingCursor) -> ListFilesResponse:
            return await self._fetch_page(current, timeout=timeout)

        return paginate(fetch_page, cursor)

    async def list_files(
        self,
        path: str,
        limit: Optional[int] = None,
        name_pattern: Optional[str] = None,
        name_pattern_exclude: Optional[str] = None,
        last_file_name: str = "",
        timeout: Optional[float] = None
    ) -> List[FilerEntry]:
        """
        List every entry in a directory, following pagination to the end.

        Args:
            path: Directory on the filer
            limit: Page size (filer default 100)
            name_pattern: Include glob, case sensitive
            name_pattern_exclude: Exclude glob, case sensitive
            last_file_name: Start after this name
            timeout: Per-request timeout override in seconds

        Returns:
            Files and subdirectories, in name order
        """
        cursor = ListingCursor(
            path=path,
            last_file_name=last_file_name,
            limit=limit if limit is not None else DEFAULT_LIST_LIMIT,
            name_pattern=name_pattern,
            name_pattern_exclude=name_pattern_exclude,
        )

        entries: List[FilerEntry] = []
        async for batch in self.iter_batches(cursor, timeout=timeout):
            entries.extend(batch)
        logger.info(f"Listed {len(entries)} entries [path={path}]")
        return entries

    async def set_tags(self, path: str, tags: Mapping[str, str], timeout: Optional[float] = None) -> None:
        """
        Validate tags and attach them to a file or directory.

        Tag keys must start with "Seaweed-". Nothing is sent unless every key
        is valid.

        Raises:
            InvalidTag: Listing every key without the prefix
            NoFileFound: If the path does not exist
        """
        validate_tags(tags)
        response = await self._request(
            "PUT",
            self._path_url(path),
            params={"tagging": ""},
            headers=dict(tags),
            timeout=timeout,
        )
        self._check(response, path, "Set tags")
        logger.info(f"Set {len(tags)} tag(s) [path={path}]")

    async def remove_tags(
        self,
        path: str,
        tag_names: Optional[Iterable[str]] = None,
        timeout: Optional[float] = None
    ) -> None:
        """
        Remove tags from a file or directory.

        With no tag names (None or empty) every Seaweed- tag is removed.
        Otherwise only the named tags are removed, after validation.

        Raises:
            InvalidTag: Listing every name without the prefix
            NoFileFound: If the path does not exist
        """
        names = list(tag_names or [])
        validate_tag_names(names)
        response = await self._request(
            "DELETE",
            self._path_url(path),
            params={"tagging": ",".join(names)},
            timeout=timeout,
        )
        self._check(response, path, "Remove tags")
        logger.info(f"Removed {len(names) or 'all'} tag(s) [path={path}]")

    async def move(self, path: str, new_path: str, timeout: Optional[float] = None) -> None:
        """
        Move or rename a file or directory.

        Raises:
            NoFileFound: If the source does not exist
        """
        response = await self._request(
            "POST",
            self._path_url(new_path),
            params={"mv.from": "/" + path.lstrip("/")},
            timeout=timeout,
        )
        self._check(response, path, "Move")
        logger.info(f"Moved {path} -> {new_path}")

    async def delete_file(
        self,
        path: str,
        params: Optional[FilerDeleteParams] = None,
        timeout: Optional[float] = None
    ) -> None:
        """
        Delete a file or directory.

        Raises:
            NoFileFound: If the path does not exist
        """
        response = await self._request(
            "DELETE", self._path_url(path), params=to_query(params), timeout=timeout
        )
        self._check(response, path, "Delete")
        logger.info(f"Deleted from filer: {path}")
