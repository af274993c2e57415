"""Convenience wrapper over boto3 for the SeaweedFS S3 gateway.

Covers the common bucket and object calls with a default bucket. Use boto3
directly for anything else.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from common.logging_config import get_logger
from seaweed.config import S3Config
from seaweed.exceptions import S3Error

logger = get_logger(__name__)


class SeaweedS3Client:
    """
    S3 client bound to a SeaweedFS gateway.

    Uses path-style addressing. Calls without an explicit bucket use
    config.default_bucket.
    """

    def __init__(self, config: Optional[S3Config] = None) -> None:
        """
        Initialize the boto3 client.

        Raises:
            S3Error: If boto3 is not installed
        """
        self.config = config or S3Config()
        self._client = self._build_client(self.config)

    @staticmethod
    def _build_client(config: S3Config) -> Any:
        """Create a boto3 S3 client from settings."""
        try:
            import boto3
            from botocore.config import Config
        except ImportError as exc:
            raise S3Error(
                "boto3 and botocore are required for the S3 client. "
                "Install with: pip install seaweed-client[s3]"
            ) from exc

        return boto3.client(
            "s3",
            endpoint_url=config.base_url,
            region_name=config.region,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            use_ssl=config.https,
            config=Config(s3={"addressing_style": "path"}),
        )

    def _bucket(self, bucket: Optional[str]) -> str:
        name = bucket or self.config.default_bucket
        if not name:
            raise S3Error("No bucket given and no default bucket configured")
        return name

    def _call(self, operation: str, **params: Any) -> Dict[str, Any]:
        logger.debug(f"S3 call: {operation} [bucket={params.get('Bucket')} key={params.get('Key')}]")
        try:
            return getattr(self._client, operation)(**params)
        except Exception as exc:
            raise S3Error(f"S3 {operation} failed: {exc}") from exc

    def alive(self) -> bool:
        """
        Check the gateway by listing buckets.

        Raises:
            S3Error: If the gateway cannot be reached
        """
        self.list_buckets()
        return True

    def list_buckets(self) -> Dict[str, Any]:
        return self._call("list_buckets")

    def create_bucket(self, bucket: str, **extra: Any) -> Dict[str, Any]:
        return self._call("create_bucket", Bucket=bucket, **extra)

    def delete_bucket(self, bucket: str) -> Dict[str, Any]:
        return self._call("delete_bucket", Bucket=bucket)

    def head_bucket(
        self,
        bucket: Optional[str] = None,
        expected_bucket_owner: Optional[str] = None
    ) -> Dict[str, Any]:
        """Check that a bucket exists and is accessible (optionally by owner)."""
        params: Dict[str, Any] = {"Bucket": self._bucket(bucket)}
        if expected_bucket_owner:
            params["ExpectedBucketOwner"] = expected_bucket_owner
        return self._call("head_bucket", **params)

    def upload(self, body: bytes, key: str, bucket: Optional[str] = None) -> Dict[str, Any]:
        return self._call("put_object", Body=body, Bucket=self._bucket(bucket), Key=key)

    def get(self, key: str, bucket: Optional[str] = None) -> Dict[str, Any]:
        """GetObject response; read the payload from response["Body"]."""
        return self._call("get_object", Bucket=self._bucket(bucket), Key=key)

    def delete(self, key: str, bucket: Optional[str] = None) -> Dict[str, Any]:
        return self._call("delete_object", Bucket=self._bucket(bucket), Key=key)

    def delete_many(self, keys: Sequence[str], bucket: Optional[str] = None) -> Dict[str, Any]:
        return self._call(
            "delete_objects",
            Bucket=self._bucket(bucket),
            Delete={"Objects": [{"Key": key} for key in keys]},
        )

    def get_metadata(self, key: str, bucket: Optional[str] = None) -> Dict[str, Any]:
        return self._call("head_object", Bucket=self._bucket(bucket), Key=key)

    def list_v2(self, bucket: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
        """Single ListObjectsV2 page; pagination is up to the caller."""
        return self._call("list_objects_v2", Bucket=self._bucket(bucket), **extra)

    def list(self, bucket: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every object in a bucket, following ListObjectsV2 pagination."""
        name = self._bucket(bucket)
        objects: List[Dict[str, Any]] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=name):
                objects.extend(page.get("Contents") or [])
        except Exception as exc:
            raise S3Error(f"S3 list of {name} failed: {exc}") from exc
        return objects

    @staticmethod
    def stream_to_string(body: Any, encoding: str = "utf-8") -> str:
        """Read a GetObject streaming body into a string."""
        try:
            return body.read().decode(encoding)
        finally:
            body.close()
