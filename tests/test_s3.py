"""Tests for the S3 gateway wrapper with a mocked boto3 client."""

import io

import pytest
from unittest.mock import MagicMock, patch

from seaweed.config import S3Config
from seaweed.exceptions import S3Error
from seaweed.s3 import SeaweedS3Client


@pytest.fixture
def boto_client():
    return MagicMock()


@pytest.fixture
def s3(boto_client):
    with patch.object(SeaweedS3Client, "_build_client", return_value=boto_client):
        yield SeaweedS3Client(S3Config(default_bucket="media"))


def test_upload_uses_default_bucket(s3, boto_client):
    s3.upload(b"data", "a.txt")
    boto_client.put_object.assert_called_once_with(Body=b"data", Bucket="media", Key="a.txt")


def test_explicit_bucket_wins(s3, boto_client):
    s3.get("a.txt", bucket="other")
    boto_client.get_object.assert_called_once_with(Bucket="other", Key="a.txt")


def test_missing_bucket_raises():
    with patch.object(SeaweedS3Client, "_build_client", return_value=MagicMock()):
        client = SeaweedS3Client(S3Config())
    with pytest.raises(S3Error):
        client.delete("a.txt")


def test_delete_many(s3, boto_client):
    s3.delete_many(["a", "b"])
    boto_client.delete_objects.assert_called_once_with(
        Bucket="media", Delete={"Objects": [{"Key": "a"}, {"Key": "b"}]}
    )


def test_head_bucket_with_owner(s3, boto_client):
    s3.head_bucket(expected_bucket_owner="1234")
    boto_client.head_bucket.assert_called_once_with(Bucket="media", ExpectedBucketOwner="1234")


def test_boto_errors_are_wrapped(s3, boto_client):
    boto_client.head_object.side_effect = RuntimeError("403 Forbidden")

    with pytest.raises(S3Error, match="head_object"):
        s3.get_metadata("a.txt")


def test_alive_lists_buckets(s3, boto_client):
    boto_client.list_buckets.return_value = {"Buckets": []}
    assert s3.alive() is True
    boto_client.list_buckets.assert_called_once_with()


def test_list_follows_paginator(s3, boto_client):
    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"Contents": [{"Key": "a"}, {"Key": "b"}]},
        {"Contents": [{"Key": "c"}]},
        {},
    ]
    boto_client.get_paginator.return_value = paginator

    objects = s3.list()

    assert [o["Key"] for o in objects] == ["a", "b", "c"]
    boto_client.get_paginator.assert_called_once_with("list_objects_v2")
    paginator.paginate.assert_called_once_with(Bucket="media")


def test_stream_to_string_closes_body():
    body = io.BytesIO("héllo".encode("utf-8"))
    assert SeaweedS3Client.stream_to_string(body) == "héllo"
    assert body.closed


def test_build_client_uses_path_style():
    pytest.importorskip("boto3")
    config = S3Config(host="s3.local", port=8333, access_key_id="key", secret_access_key="secret")

    client = SeaweedS3Client._build_client(config)

    assert client.meta.endpoint_url == "http://s3.local:8333"
    assert client.meta.config.s3["addressing_style"] == "path"
