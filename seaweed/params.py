"""Optional request parameters for master, volume and filer calls.

Every parameter bag is a dataclass whose fields default to "unset". Unset and
falsy values are left out of the query string, so ``fsync=False`` and
``fsync=None`` both mean "use the server default". Field names follow Python
conventions; the wire spelling is kept in the field metadata where it differs.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Literal, Optional
from urllib.parse import urlencode

Replication = Literal["000", "001", "010", "100", "200", "110"]
"""
Replica placement:
    000 no replication, 001 once on the same rack, 010 once on a different
    rack in the same data center, 100 once in a different data center,
    200 twice in two other data centers, 110 once on a different rack and
    once in a different data center.
"""


def _wire(name: str) -> Dict[str, str]:
    return {"wire": name}


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true"
    return str(value)


def to_query(params: Optional[object]) -> Dict[str, str]:
    """
    Convert a parameter dataclass to query parameters.

    Args:
        params: Parameter dataclass instance or None

    Returns:
        Ordered dict of wire name to string value, falsy values dropped
    """
    if params is None:
        return {}
    query: Dict[str, str] = {}
    for f in fields(params):
        value = getattr(params, f.name)
        if not value:
            continue
        query[f.metadata.get("wire", f.name)] = _render(value)
    return query


def encode_query(params: Optional[object]) -> str:
    """Render parameters as a URL-encoded query string ("" when empty)."""
    return urlencode(to_query(params))


@dataclass
class AssignParams:
    """Parameters for /dir/assign."""
    count: Optional[int] = None
    collection: Optional[str] = None
    data_center: Optional[str] = field(default=None, metadata=_wire("dataCenter"))
    rack: Optional[str] = None
    data_node: Optional[str] = field(default=None, metadata=_wire("dataNode"))
    replication: Optional[Replication] = None
    ttl: Optional[str] = None
    preallocate: Optional[int] = None
    memory_map_max_size_mb: Optional[int] = field(default=None, metadata=_wire("memoryMapMaxSizeMb"))
    writable_volume_count: Optional[int] = field(default=None, metadata=_wire("writableVolumeCount"))
    disk: Optional[str] = None


@dataclass
class GrowParams:
    """Parameters for /vol/grow (pre-allocating volumes)."""
    count: Optional[int] = None
    collection: Optional[str] = None
    data_center: Optional[str] = field(default=None, metadata=_wire("dataCenter"))
    rack: Optional[str] = None
    data_node: Optional[str] = field(default=None, metadata=_wire("dataNode"))
    replication: Optional[Replication] = None
    ttl: Optional[str] = None
    preallocate: Optional[int] = None
    memory_map_max_size_mb: Optional[int] = field(default=None, metadata=_wire("memoryMapMaxSizeMb"))


@dataclass
class LookupParams:
    """Parameters for /dir/lookup."""
    volume_id: int = field(metadata=_wire("volumeId"))
    collection: Optional[str] = None
    file_id: Optional[str] = field(default=None, metadata=_wire("fileId"))
    read: Optional[bool] = None


@dataclass
class VolumeWriteParams:
    """
    Parameters for uploads to a volume server.

    Attributes:
        fsync: Incur an fsync on write
        type: "replicate" marks an already replicated write
        ts: Modification timestamp in epoch seconds
        cm: Content is a chunk manifest
    """
    fsync: Optional[bool] = None
    type: Optional[Literal["replicate"]] = None
    ts: Optional[int] = None
    cm: Optional[bool] = None


@dataclass
class VolumeReadParams:
    """
    Parameters for reads from a volume server.

    Resizing and cropping only apply to stored .png, .jpg, .jpeg and .gif
    files. Crop coordinates must lie inside the image.
    """
    read_deleted: Optional[bool] = field(default=None, metadata=_wire("readDeleted"))
    width: Optional[int] = None
    height: Optional[int] = None
    mode: Optional[Literal["fit", "fill", "thumbnail"]] = None
    crop_x1: Optional[int] = None
    crop_y1: Optional[int] = None
    crop_x2: Optional[int] = None
    crop_y2: Optional[int] = None


@dataclass
class FilerWriteParams:
    """
    Parameters for filer POST/PUT uploads.

    Attributes:
        ttl: Time to live, e.g. "3m", "4h", "5d", "6w", "7M", "8y"
        max_mb: Max chunk size
        mode: File mode, server default "0660"
        op: "append" appends the body to an existing file
        skip_check_parent_dir: Skip the parent directory existence check
    """
    data_center: Optional[str] = field(default=None, metadata=_wire("dataCenter"))
    rack: Optional[str] = None
    data_node: Optional[str] = field(default=None, metadata=_wire("dataNode"))
    collection: Optional[str] = None
    replication: Optional[Replication] = None
    fsync: Optional[bool] = None
    save_inside: Optional[bool] = field(default=None, metadata=_wire("saveInside"))
    ttl: Optional[str] = None
    max_mb: Optional[int] = field(default=None, metadata=_wire("maxMB"))
    mode: Optional[str] = None
    op: Optional[Literal["append"]] = None
    skip_check_parent_dir: Optional[bool] = field(default=None, metadata=_wire("skipCheckParentDir"))


@dataclass
class FilerReadParams:
    """Parameters for filer GET requests."""
    metadata: Optional[bool] = None
    resolve_manifest: Optional[bool] = field(default=None, metadata=_wire("resolveManifest"))
    response_content_disposition: Optional[Literal["attachment", "inline"]] = field(
        default=None, metadata=_wire("response-content-disposition")
    )


@dataclass
class FilerDeleteParams:
    """
    Parameters for filer DELETE requests.

    recursive defaults to the filer's recursive_delete option in filer.toml.
    """
    recursive: Optional[bool] = None
    ignore_recursive_error: Optional[bool] = field(default=None, metadata=_wire("ignoreRecursiveError"))
    skip_chunk_deletion: Optional[bool] = field(default=None, metadata=_wire("skipChunkDeletion"))
