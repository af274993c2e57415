"""Tests for directory listing pagination."""

import httpx
import pytest

from seaweed.models import DirectoryEntry, FileEntry, ListFilesResponse
from seaweed.pagination import ListingCursor, paginate


def file_json(path: str) -> dict:
    return {"FullPath": path, "FileSize": 3, "chunks": [{"file_id": "3,01637037d6", "size": 3}]}


def dir_json(path: str) -> dict:
    return {"FullPath": path, "Mode": 2147484141}


class PagedDirectory:
    """Fake filer listing handler over a sorted list of names."""

    def __init__(self, names):
        self.names = sorted(names)
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        limit = int(params.get("limit", "100"))
        after = params.get("lastFileName", "")
        remaining = [n for n in self.names if n > after]
        page = remaining[:limit]
        return httpx.Response(200, json={
            "Path": request.url.path,
            "Entries": [file_json(f"{request.url.path}/{n}") for n in page] or None,
            "Limit": limit,
            "LastFileName": page[-1] if page else "",
            "ShouldDisplayLoadMore": len(remaining) > limit,
        })


async def collect(iterator):
    return [batch async for batch in iterator]


class TestPaginate:
    """Tests for the paginate generator with a fake page source."""

    @pytest.mark.asyncio
    async def test_short_page_stops_after_one_request(self):
        calls = []

        async def fetch(cursor):
            calls.append(cursor.last_file_name)
            return ListFilesResponse.from_json({"Entries": [file_json("/d/a")]})

        batches = await collect(paginate(fetch, ListingCursor(path="/d", limit=2)))

        assert [[e.name for e in b] for b in batches] == [["a"]]
        assert calls == [""]

    @pytest.mark.asyncio
    async def test_exact_multiple_of_limit_needs_extra_request(self):
        pages = [
            [file_json("/d/a"), file_json("/d/b")],
            [],
        ]
        calls = []

        async def fetch(cursor):
            calls.append(cursor.last_file_name)
            return ListFilesResponse.from_json({"Entries": pages[len(calls) - 1]})

        batches = await collect(paginate(fetch, ListingCursor(path="/d", limit=2)))

        assert len(batches) == 1
        assert calls == ["", "b"]

    @pytest.mark.asyncio
    async def test_cursor_advances_before_each_batch_is_seen(self):
        cursor = ListingCursor(path="/d", limit=1)
        pages = iter([[file_json("/d/a")], [file_json("/d/b")], []])

        async def fetch(current):
            return ListFilesResponse.from_json({"Entries": next(pages)})

        seen = []
        async for batch in paginate(fetch, cursor):
            seen.append((batch[0].name, cursor.last_file_name))

        assert seen == [("a", "a"), ("b", "b")]

    @pytest.mark.asyncio
    async def test_empty_directory_yields_nothing(self):
        async def fetch(cursor):
            return ListFilesResponse.from_json({"Path": "/d", "Entries": None})

        assert await collect(paginate(fetch, ListingCursor(path="/d"))) == []

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            ListingCursor(path="/d", limit=0)

    def test_cursor_query(self):
        cursor = ListingCursor(path="/d", last_file_name="b", limit=5, name_pattern="*.txt")
        assert cursor.to_query() == {"limit": "5", "lastFileName": "b", "namePattern": "*.txt"}


class TestFilerListing:
    """Listing through FilerClient against a paged fake directory."""

    @pytest.mark.asyncio
    async def test_list_files_follows_every_page(self, filer_for):
        directory = PagedDirectory(["a", "b", "c", "d", "e"])
        filer = filer_for(directory.handler)

        entries = await filer.list_files("/docs", limit=2)

        assert [e.name for e in entries] == ["a", "b", "c", "d", "e"]
        assert len(directory.requests) == 3
        assert directory.requests[1].url.params["lastFileName"] == "b"
        assert directory.requests[0].headers["accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_exact_limit_boundary_makes_two_requests(self, filer_for):
        directory = PagedDirectory(["a", "b"])
        filer = filer_for(directory.handler)

        entries = await filer.list_files("/docs", limit=2)

        assert [e.name for e in entries] == ["a", "b"]
        assert len(directory.requests) == 2

    @pytest.mark.asyncio
    async def test_iter_batches_yields_one_batch_per_page(self, filer_for):
        directory = PagedDirectory(["a", "b", "c"])
        filer = filer_for(directory.handler)

        batches = await collect(filer.iter_batches(ListingCursor(path="/docs", limit=2)))

        assert [[e.name for e in b] for b in batches] == [["a", "b"], ["c"]]

    @pytest.mark.asyncio
    async def test_listing_distinguishes_files_and_directories(self, filer_for):
        def handler(request):
            return httpx.Response(200, json={
                "Path": "/docs",
                "Entries": [dir_json("/docs/sub"), file_json("/docs/z.txt")],
                "Limit": 100,
            })

        entries = await filer_for(handler).list_files("/docs")

        assert isinstance(entries[0], DirectoryEntry)
        assert isinstance(entries[1], FileEntry)
        assert entries[1].file_size == 3

    @pytest.mark.asyncio
    async def test_name_pattern_is_sent(self, filer_for):
        directory = PagedDirectory([])
        await filer_for(directory.handler).list_files("/docs", name_pattern="*.pdf", name_pattern_exclude="a*")

        params = directory.requests[0].url.params
        assert params["namePattern"] == "*.pdf"
        assert params["namePatternExclude"] == "a*"
        assert params["limit"] == "100"
