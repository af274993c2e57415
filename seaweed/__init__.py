"""Async client for SeaweedFS master, volume and filer servers."""

from seaweed.client import SeaweedClient
from seaweed.config import FilerConfig, MasterConfig, S3Config
from seaweed.exceptions import (
    DeleteFailed,
    InvalidTag,
    MalformedIdentifier,
    NoFileFound,
    NoVolumeFound,
    S3Error,
    SeaweedError,
    TransferFailed,
    TransferTimeout,
)
from seaweed.fid import FileId, parse_volume_id
from seaweed.filer import FilerClient
from seaweed.models import (
    AssignResult,
    DeleteResult,
    DirectoryEntry,
    FileEntry,
    FilerEntry,
    VolumeLocation,
    WriteResult,
)
from seaweed.pagination import ListingCursor
from seaweed.streaming import ObjectStream
from seaweed.tags import validate_tag_names, validate_tags

__all__ = [
    "AssignResult",
    "DeleteFailed",
    "DeleteResult",
    "DirectoryEntry",
    "FileEntry",
    "FileId",
    "FilerClient",
    "FilerConfig",
    "FilerEntry",
    "InvalidTag",
    "ListingCursor",
    "MalformedIdentifier",
    "MasterConfig",
    "NoFileFound",
    "NoVolumeFound",
    "ObjectStream",
    "S3Config",
    "S3Error",
    "SeaweedClient",
    "SeaweedError",
    "TransferFailed",
    "TransferTimeout",
    "VolumeLocation",
    "WriteResult",
    "parse_volume_id",
    "validate_tag_names",
    "validate_tags",
]
