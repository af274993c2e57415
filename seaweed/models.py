"""Pydantic models for master, volume server and filer responses."""

import posixpath
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for responses: accept wire names or field names, keep unknown fields."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class VolumeLocation(WireModel):
    """One server hosting a volume. Valid only for the call that produced it."""
    url: str
    public_url: str = Field(alias="publicUrl")
    data_center: Optional[str] = Field(default=None, alias="dataCenter")


class LookupResult(WireModel):
    """Response model for /dir/lookup."""
    volume_id: Optional[str] = Field(default=None, alias="volumeId")
    locations: List[VolumeLocation] = Field(default_factory=list)


class AssignResult(WireModel):
    """Response model for /dir/assign."""
    count: int
    fid: str
    url: str
    public_url: str = Field(alias="publicUrl")


class WriteResult(WireModel):
    """Response model for an upload to a volume server or filer."""
    name: Optional[str] = None
    size: int
    etag: Optional[str] = Field(default=None, alias="eTag")


class DeleteResult(WireModel):
    """Response model for a volume server delete."""
    size: int


class ClusterStatus(WireModel):
    """Response model for /cluster/status."""
    is_leader: bool = Field(default=False, alias="IsLeader")
    leader: Optional[str] = Field(default=None, alias="Leader")
    peers: Optional[List[str]] = Field(default=None, alias="Peers")


class DirStatus(WireModel):
    """Response model for /dir/status; the topology is kept as raw JSON."""
    version: Optional[str] = Field(default=None, alias="Version")
    topology: Dict[str, Any] = Field(default_factory=dict, alias="Topology")


class VacuumResult(DirStatus):
    """Response model for /vol/vacuum."""


class DiskStatus(WireModel):
    dir: str
    all: int = 0
    used: int = 0
    free: int = 0
    percent_free: float = 0.0
    percent_used: float = 0.0


class VolumeServerStatus(WireModel):
    """Response model for a volume server's /status."""
    version: Optional[str] = Field(default=None, alias="Version")
    disk_statuses: List[DiskStatus] = Field(default_factory=list, alias="DiskStatuses")
    volumes: List[Dict[str, Any]] = Field(default_factory=list, alias="Volumes")


class FileChunk(WireModel):
    file_id: Optional[str] = None
    offset: int = 0
    size: int = 0
    mtime: int = 0
    e_tag: Optional[str] = None
    fid: Optional[Dict[str, Any]] = None
    is_gzipped: bool = False


class EntryBase(WireModel):
    """Fields shared by files and directories in filer responses."""
    full_path: str = Field(alias="FullPath")
    mtime: Optional[datetime] = Field(default=None, alias="Mtime")
    crtime: Optional[datetime] = Field(default=None, alias="Crtime")
    mode: Optional[int] = Field(default=None, alias="Mode")
    uid: Optional[int] = Field(default=None, alias="Uid")
    gid: Optional[int] = Field(default=None, alias="Gid")
    mime: Optional[str] = Field(default=None, alias="Mime")
    ttl_sec: int = Field(default=0, alias="TtlSec")
    user_name: Optional[str] = Field(default=None, alias="UserName")
    group_names: Optional[List[str]] = Field(default=None, alias="GroupNames")
    symlink_target: Optional[str] = Field(default=None, alias="SymlinkTarget")
    md5: Optional[str] = Field(default=None, alias="Md5")
    extended: Optional[Dict[str, Any]] = Field(default=None, alias="Extended")

    @property
    def name(self) -> str:
        return posixpath.basename(self.full_path.rstrip("/"))


class FileEntry(EntryBase):
    """A filer entry backed by chunks on volume servers."""
    replication: Optional[str] = Field(default=None, alias="Replication")
    collection: Optional[str] = Field(default=None, alias="Collection")
    file_size: int = Field(default=0, alias="FileSize")
    chunks: List[FileChunk]

    @property
    def is_directory(self) -> bool:
        return False


class DirectoryEntry(EntryBase):
    """A filer entry with no chunks."""
    file_size: int = Field(default=0, alias="FileSize")
    rdev: int = Field(default=0, alias="Rdev")
    inode: int = Field(default=0, alias="Inode")
    hard_link_id: Optional[str] = Field(default=None, alias="HardLinkId")
    hard_link_counter: int = Field(default=0, alias="HardLinkCounter")
    content: Optional[str] = Field(default=None, alias="Content")
    remote: Optional[Dict[str, Any]] = Field(default=None, alias="Remote")
    quota: int = Field(default=0, alias="Quota")

    @property
    def is_directory(self) -> bool:
        return True


FilerEntry = Union[FileEntry, DirectoryEntry]


def entry_from_json(raw: Dict[str, Any]) -> FilerEntry:
    """
    Resolve a raw filer entry into a FileEntry or DirectoryEntry.

    Files are told apart from directories by a non-null "chunks" field.
    """
    if raw.get("chunks") is not None:
        return FileEntry.model_validate(raw)
    return DirectoryEntry.model_validate(raw)


class ListFilesResponse(WireModel):
    """Response model for one page of a filer directory listing."""
    path: str = Field(default="", alias="Path")
    entries: List[FilerEntry] = Field(default_factory=list, alias="Entries")
    limit: int = Field(default=0, alias="Limit")
    last_file_name: str = Field(default="", alias="LastFileName")
    should_display_load_more: bool = Field(default=False, alias="ShouldDisplayLoadMore")

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "ListFilesResponse":
        entries = [entry_from_json(item) for item in (raw.get("Entries") or [])]
        return cls.model_validate({**raw, "Entries": entries})
