"""Connection settings for master, filer and S3 gateway.

Settings are frozen at construction; build a new value to point a client
elsewhere.
"""

import os
from dataclasses import dataclass
from typing import Optional

from common.constants import (
    DEFAULT_FILER_PORT,
    DEFAULT_MASTER_PORT,
    DEFAULT_S3_PORT,
    DEFAULT_TIMEOUT_SECONDS,
)


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_port(value: Optional[str], default: Optional[int]) -> Optional[int]:
    if value is None:
        return default
    if not value.strip():
        return None
    return int(value)


@dataclass(frozen=True)
class ServerConfig:
    """
    Address of a single HTTP endpoint.

    Attributes:
        host: Host name or IP of the server
        port: Port; None leaves it out of the URL (e.g. behind a proxy)
        https: Use https instead of http
        timeout: Default per-request timeout in seconds
    """
    host: str = "localhost"
    port: Optional[int] = None
    https: bool = False
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def protocol(self) -> str:
        return "https" if self.https else "http"

    @property
    def base_url(self) -> str:
        port = f":{self.port}" if self.port else ""
        return f"{self.protocol}://{self.host}{port}"


@dataclass(frozen=True)
class MasterConfig(ServerConfig):
    """Master server settings (default localhost:9333)."""
    port: Optional[int] = DEFAULT_MASTER_PORT

    @classmethod
    def from_environment(cls) -> "MasterConfig":
        return cls(
            host=os.environ.get("SEAWEED_MASTER_HOST", cls.host),
            port=_as_port(os.environ.get("SEAWEED_MASTER_PORT"), cls.port),
            https=_as_bool(os.environ.get("SEAWEED_HTTPS"), cls.https),
            timeout=float(os.environ.get("SEAWEED_TIMEOUT", cls.timeout)),
        )


@dataclass(frozen=True)
class FilerConfig(ServerConfig):
    """Filer server settings (default localhost:8888)."""
    port: Optional[int] = DEFAULT_FILER_PORT

    @classmethod
    def from_environment(cls) -> "FilerConfig":
        return cls(
            host=os.environ.get("SEAWEED_FILER_HOST", cls.host),
            port=_as_port(os.environ.get("SEAWEED_FILER_PORT"), cls.port),
            https=_as_bool(os.environ.get("SEAWEED_HTTPS"), cls.https),
            timeout=float(os.environ.get("SEAWEED_TIMEOUT", cls.timeout)),
        )


@dataclass(frozen=True)
class S3Config(ServerConfig):
    """
    S3 gateway settings (default localhost:8333).

    The region is mandatory for boto3 but ignored by the gateway. Empty
    credentials work when authorization is not configured with s3.configure.
    """
    port: Optional[int] = DEFAULT_S3_PORT
    region: str = "us-west-1"
    access_key_id: str = ""
    secret_access_key: str = ""
    default_bucket: Optional[str] = None

    @classmethod
    def from_environment(cls) -> "S3Config":
        return cls(
            host=os.environ.get("SEAWEED_S3_HOST", cls.host),
            port=_as_port(os.environ.get("SEAWEED_S3_PORT"), cls.port),
            https=_as_bool(os.environ.get("SEAWEED_HTTPS"), cls.https),
            timeout=float(os.environ.get("SEAWEED_TIMEOUT", cls.timeout)),
            region=os.environ.get("SEAWEED_S3_REGION", cls.region),
            access_key_id=os.environ.get("SEAWEED_S3_ACCESS_KEY_ID", cls.access_key_id),
            secret_access_key=os.environ.get("SEAWEED_S3_SECRET_ACCESS_KEY", cls.secret_access_key),
            default_bucket=os.environ.get("SEAWEED_S3_BUCKET") or None,
        )
