"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class AssignCommand:
    """Reserve a new fid on the master."""

    count: int | None = None
    collection: str | None = None
    command: Literal["assign"] = "assign"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file; overwrite fid when given."""

    file_path: str
    fid: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download an object by fid."""

    fid: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete an object by fid."""

    fid: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class LookupCommand:
    """Show where a volume (or a fid's volume) lives."""

    target: str
    command: Literal["lookup"] = "lookup"


@dataclass(frozen=True)
class ListCommand:
    """List a filer directory."""

    path: str
    limit: int | None = None
    name_pattern: str | None = None
    command: Literal["ls"] = "ls"


@dataclass(frozen=True)
class TagCommand:
    """Set tags on a filer path."""

    path: str
    tags: tuple[tuple[str, str], ...]
    command: Literal["tag"] = "tag"


@dataclass(frozen=True)
class UntagCommand:
    """Remove tags from a filer path (all when none named)."""

    path: str
    tag_names: tuple[str, ...] = ()
    command: Literal["untag"] = "untag"


@dataclass(frozen=True)
class StatusCommand:
    """Show cluster status."""

    command: Literal["status"] = "status"


CommandRequest = (
    AssignCommand
    | UploadCommand
    | DownloadCommand
    | DeleteCommand
    | LookupCommand
    | ListCommand
    | TagCommand
    | UntagCommand
    | StatusCommand
)
