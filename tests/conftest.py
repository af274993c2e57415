"""Shared pytest fixtures for all tests."""

import hashlib
import re

import httpx
import pytest

from cli.config import Config
from seaweed.client import SeaweedClient
from seaweed.config import FilerConfig, MasterConfig
from seaweed.fid import FileId
from seaweed.filer import FilerClient

MASTER_HOST = "master"
VOLUME_URL = "volume1:8080"
PUBLIC_URL = "public1:8080"


def parse_upload(request: httpx.Request) -> tuple[str, bytes]:
    """
    Pull the filename and content of the single file part of a multipart request.

    Returns:
        Tuple of (filename, content)
    """
    content_type = request.headers["content-type"]
    boundary = content_type.split("boundary=", 1)[1].encode()
    part = request.content.split(b"--" + boundary)[1]
    headers, _, body = part.partition(b"\r\n\r\n")
    filename = re.search(rb'filename="([^"]*)"', headers).group(1).decode()
    return filename, body[:-2]


class FakeCluster:
    """
    In-memory master and volume servers behind an httpx.MockTransport.

    Volume 3 lives on volume1:8080 (public address public1:8080). Volume 7
    is known to the master but has no locations. Every request is recorded.
    """

    def __init__(self):
        self.locations = {
            3: [{"url": VOLUME_URL, "publicUrl": PUBLIC_URL, "dataCenter": "dc1"}],
            7: [],
        }
        self.objects: dict[str, tuple[str, bytes]] = {}
        self.requests: list[httpx.Request] = []
        self.next_key = 1

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def master_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == MASTER_HOST]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == MASTER_HOST:
            return self._master(request)
        return self._volume(request)

    def _master(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/dir/assign":
            fid = str(FileId(volume_id=3, file_key=self.next_key, cookie=0x637037D6))
            self.next_key += 1
            return httpx.Response(200, json={
                "count": int(request.url.params.get("count", "1")),
                "fid": fid,
                "url": VOLUME_URL,
                "publicUrl": PUBLIC_URL,
            })
        if path == "/dir/lookup":
            volume_id = int(request.url.params["volumeId"])
            if volume_id not in self.locations:
                return httpx.Response(404, json={"volumeId": str(volume_id), "error": "volume id not found"})
            return httpx.Response(200, json={
                "volumeId": str(volume_id),
                "locations": self.locations[volume_id],
            })
        return httpx.Response(404)

    def _volume(self, request: httpx.Request) -> httpx.Response:
        fid = request.url.path.lstrip("/")
        if request.method == "POST":
            filename, data = parse_upload(request)
            self.objects[fid] = (filename, data)
            return httpx.Response(201, json={
                "name": filename,
                "size": len(data),
                "eTag": hashlib.md5(data).hexdigest()[:8],
            })
        if fid not in self.objects:
            return httpx.Response(404, json={} if request.method == "DELETE" else None)
        if request.method == "GET":
            return httpx.Response(200, content=self.objects[fid][1])
        if request.method == "DELETE":
            _, data = self.objects.pop(fid)
            return httpx.Response(202, json={"size": len(data)})
        return httpx.Response(405)


@pytest.fixture
def cluster():
    """Fresh in-memory master and volume servers."""
    return FakeCluster()


@pytest.fixture
def seaweed_client(cluster):
    """SeaweedClient wired to the fake cluster."""
    session = httpx.AsyncClient(transport=cluster.transport())
    return SeaweedClient(MasterConfig(host=MASTER_HOST), session=session)


@pytest.fixture
def master_client_for():
    """Factory for a SeaweedClient whose requests all go to one handler."""
    def build(handler) -> SeaweedClient:
        session = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return SeaweedClient(MasterConfig(host=MASTER_HOST), session=session)
    return build


@pytest.fixture
def filer_for():
    """Factory for a FilerClient whose requests all go to one handler."""
    def build(handler) -> FilerClient:
        session = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return FilerClient(FilerConfig(host="filer"), session=session)
    return build


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .seaweed directory
    """
    config_dir = tmp_path / '.seaweed'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path
