"""Tests for transfers against volume servers."""

import httpx
import pytest

from seaweed.exceptions import (
    DeleteFailed,
    MalformedIdentifier,
    NoFileFound,
    NoVolumeFound,
    TransferFailed,
    TransferTimeout,
)
from seaweed.params import VolumeWriteParams


class TrackingStream(httpx.AsyncByteStream):
    """Response body that records whether it was closed."""

    def __init__(self, chunks, fail_after=None):
        self.chunks = chunks
        self.fail_after = fail_after
        self.closed = False

    async def __aiter__(self):
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index == self.fail_after:
                raise httpx.ReadError("connection reset")
            yield chunk

    async def aclose(self):
        self.closed = True


def streaming_handler(body: TrackingStream, status_code: int = 200):
    def handler(request):
        if request.url.path == "/dir/lookup":
            return httpx.Response(200, json={
                "volumeId": request.url.params["volumeId"],
                "locations": [{"url": "volume1:8080", "publicUrl": "volume1:8080"}],
            })
        return httpx.Response(status_code, stream=body)
    return handler


class TestRoundTrip:
    """Write, read and delete against the fake cluster."""

    @pytest.mark.asyncio
    async def test_assign_write_get_delete(self, seaweed_client, cluster):
        assigned = await seaweed_client.assign()
        assert assigned.fid == "3,01637037d6"
        assert seaweed_client.get_volume_id(assigned.fid) == 3

        written = await seaweed_client.write(assigned.fid, assigned.url, b"CONTENTS", "f.txt")
        assert written.name == "f.txt"
        assert written.size == 8
        assert cluster.objects["3,01637037d6"] == ("f.txt", b"CONTENTS")

        assert await seaweed_client.get(assigned.fid) == b"CONTENTS"

        deleted = await seaweed_client.delete(assigned.fid)
        assert deleted.size == 8

        with pytest.raises(NoFileFound):
            await seaweed_client.get(assigned.fid)

    @pytest.mark.asyncio
    async def test_upload_assigns_then_writes(self, seaweed_client, cluster):
        assigned, written = await seaweed_client.upload("héllo", "greeting.txt")

        assert written.size == len("héllo".encode("utf-8"))
        assert cluster.objects[assigned.fid] == ("greeting.txt", "héllo".encode("utf-8"))

    @pytest.mark.asyncio
    async def test_update_resolves_volume(self, seaweed_client, cluster):
        assigned, _ = await seaweed_client.upload(b"v1", "f.txt")

        await seaweed_client.update(assigned.fid, b"version two", "f.txt")

        assert cluster.objects[assigned.fid] == ("f.txt", b"version two")
        lookups = [r for r in cluster.master_requests() if r.url.path == "/dir/lookup"]
        assert lookups[-1].url.params["volumeId"] == "3"

    @pytest.mark.asyncio
    async def test_update_with_public_url(self, seaweed_client, cluster):
        assigned, _ = await seaweed_client.upload(b"v1", "f.txt")

        await seaweed_client.update(assigned.fid, b"v2", "f.txt", public=True)

        assert cluster.requests[-1].url.host == "public1"

    @pytest.mark.asyncio
    async def test_write_params_go_in_query(self, seaweed_client, cluster):
        assigned = await seaweed_client.assign()

        await seaweed_client.write(
            assigned.fid, assigned.url, b"x", "x.bin", params=VolumeWriteParams(fsync=True, type="replicate")
        )

        assert cluster.requests[-1].url.query == b"fsync=true&type=replicate"

    @pytest.mark.asyncio
    async def test_get_missing_volume(self, seaweed_client):
        with pytest.raises(NoVolumeFound):
            await seaweed_client.get("99,01637037d6")

    @pytest.mark.asyncio
    async def test_get_malformed_fid(self, seaweed_client, cluster):
        with pytest.raises(MalformedIdentifier):
            await seaweed_client.get("not-a-fid")
        assert cluster.requests == []

    @pytest.mark.asyncio
    async def test_requests_carry_request_id(self, seaweed_client, cluster):
        await seaweed_client.assign()
        await seaweed_client.assign()

        ids = [r.headers["X-Request-ID"] for r in cluster.requests]
        assert len(ids) == 2
        assert ids[0] != ids[1]


class TestDelete:
    """Delete status and body handling."""

    @pytest.mark.asyncio
    async def test_delete_missing_raises_no_file_found(self, seaweed_client):
        with pytest.raises(NoFileFound) as exc_info:
            await seaweed_client.delete("3,01637037d6")
        assert exc_info.value.fid == "3,01637037d6"

    @pytest.mark.parametrize("body", [b"", b"null", b"{}", b"0"])
    @pytest.mark.asyncio
    async def test_unconfirmed_delete_raises_delete_failed(self, master_client_for, body):
        client = master_client_for(lambda request: httpx.Response(202, content=body))

        with pytest.raises(DeleteFailed):
            await client.delete("3,01637037d6", volume_url="volume1:8080")

    @pytest.mark.asyncio
    async def test_delete_server_error(self, master_client_for):
        client = master_client_for(lambda request: httpx.Response(500, text="disk full"))

        with pytest.raises(TransferFailed) as exc_info:
            await client.delete("3,01637037d6", volume_url="volume1:8080")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_delete_non_json_body(self, master_client_for):
        client = master_client_for(lambda request: httpx.Response(202, text="<html>ok</html>"))

        with pytest.raises(TransferFailed):
            await client.delete("3,01637037d6", volume_url="volume1:8080")

    @pytest.mark.asyncio
    async def test_delete_with_explicit_url_skips_lookup(self, master_client_for):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(202, json={"size": 42})

        client = master_client_for(handler)
        result = await client.delete("3,01637037d6", volume_url="volume9:8080")

        assert result.size == 42
        assert [r.url.host for r in seen] == ["volume9"]
        assert seen[0].method == "DELETE"


class TestTransportErrors:
    """Timeouts and connection errors."""

    @pytest.mark.asyncio
    async def test_timeout_maps_to_transfer_timeout(self, master_client_for):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = master_client_for(handler)
        with pytest.raises(TransferTimeout):
            await client.assign()

    @pytest.mark.asyncio
    async def test_connect_error_maps_to_transfer_failed(self, master_client_for):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = master_client_for(handler)
        with pytest.raises(TransferFailed):
            await client.get("3,01637037d6", volume_url="volume1:8080")


class TestStreaming:
    """Streamed reads release their connection."""

    @pytest.mark.asyncio
    async def test_stream_yields_chunks_and_closes_on_exhaustion(self, master_client_for):
        body = TrackingStream([b"abc", b"def"])
        client = master_client_for(streaming_handler(body))

        async with client.stream_object("3,01637037d6", chunk_size=2) as stream:
            chunks = [chunk async for chunk in stream]
            assert stream.closed
            assert body.closed

        assert b"".join(chunks) == b"abcdef"
        assert len(chunks) == 3

    @pytest.mark.asyncio
    async def test_early_exit_closes_stream(self, master_client_for):
        body = TrackingStream([b"abc", b"def", b"ghi"])
        client = master_client_for(streaming_handler(body))

        stream = await client.get_stream("3,01637037d6", chunk_size=3)
        async with stream:
            async for chunk in stream:
                assert chunk == b"abc"
                break
            assert not body.closed

        assert body.closed

    @pytest.mark.asyncio
    async def test_break_and_drop_releases_connection(self, master_client_for):
        body = TrackingStream([b"a", b"b", b"c"])
        client = master_client_for(streaming_handler(body))

        async with client.stream_object("3,01637037d6", chunk_size=1) as stream:
            async for _ in stream:
                break
        del stream

        assert body.closed

    @pytest.mark.asyncio
    async def test_iterating_without_entering_raises(self, master_client_for):
        body = TrackingStream([b"abc"])
        client = master_client_for(streaming_handler(body))

        stream = await client.get_stream("3,01637037d6")
        with pytest.raises(RuntimeError, match="async with"):
            async for _ in stream:
                pass
        await stream.aclose()

        assert body.closed

    @pytest.mark.asyncio
    async def test_read_error_closes_stream(self, master_client_for):
        body = TrackingStream([b"abc", b"def"], fail_after=1)
        client = master_client_for(streaming_handler(body))

        stream = await client.get_stream("3,01637037d6", chunk_size=3)
        with pytest.raises(TransferFailed):
            async with stream:
                async for _ in stream:
                    pass

        assert stream.closed
        assert body.closed

    @pytest.mark.asyncio
    async def test_stream_is_single_use(self, master_client_for):
        client = master_client_for(streaming_handler(TrackingStream([b"abc"])))

        stream = await client.get_stream("3,01637037d6")
        async with stream:
            assert await stream.read() == b"abc"

            with pytest.raises(RuntimeError, match="already been consumed"):
                async for _ in stream:
                    pass

    @pytest.mark.asyncio
    async def test_missing_object_raises_before_streaming(self, master_client_for):
        body = TrackingStream([b"not found"])
        client = master_client_for(streaming_handler(body, status_code=404))

        with pytest.raises(NoFileFound):
            await client.get_stream("3,01637037d6")
        assert body.closed

    @pytest.mark.asyncio
    async def test_stream_object_missing_raises_on_entry(self, master_client_for):
        body = TrackingStream([b"not found"])
        client = master_client_for(streaming_handler(body, status_code=404))

        with pytest.raises(NoFileFound):
            async with client.stream_object("3,01637037d6"):
                pytest.fail("block must not run for a missing object")
        assert body.closed

    @pytest.mark.asyncio
    async def test_stream_exposes_headers(self, master_client_for):
        def handler(request):
            return httpx.Response(200, content=b"12345", headers={"Content-Type": "text/plain"})

        client = master_client_for(handler)
        stream = await client.get_stream("3,01637037d6", volume_url="volume1:8080")
        async with stream:
            assert stream.status_code == 200
            assert stream.content_length == 5
            assert stream.headers["content-type"] == "text/plain"
