"""Command handler functions for CLI operations.

Handlers are synchronous for the REPL; each one runs its client calls in a
fresh event loop and returns the text to print. Clients can be injected for
testing, otherwise they are built from ~/.seaweed/config.json and closed
when the command finishes.
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

from common.logging_config import get_logger
from cli.config import Config
from cli.constants import DOWNLOADS_DIR
from cli.models import (
    AssignCommand,
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LookupCommand,
    StatusCommand,
    TagCommand,
    UntagCommand,
    UploadCommand,
)
from cli.utils import format_entry, format_file_size, format_locations
from seaweed.client import SeaweedClient
from seaweed.exceptions import SeaweedError
from seaweed.fid import parse_volume_id
from seaweed.filer import FilerClient
from seaweed.params import AssignParams

logger = get_logger(__name__)

T = TypeVar("T")

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        logger.debug("Loading CLI config")
        _config = Config(Path.home() / '.seaweed' / 'config.json')
    return _config


def _run(action: Callable[[], Awaitable[str]]) -> str:
    """Run one command to completion, turning client errors into messages."""
    try:
        return asyncio.run(action())
    except SeaweedError as e:
        logger.debug(f"Command failed: {e}")
        return f"Error: {e}"
    except OSError as e:
        return f"Error: {e}"


async def _with_client(
    client: Optional[SeaweedClient],
    action: Callable[[SeaweedClient], Awaitable[T]]
) -> T:
    if client is not None:
        return await action(client)
    async with SeaweedClient(get_config().get_master_config()) as owned:
        return await action(owned)


async def _with_filer(
    filer: Optional[FilerClient],
    action: Callable[[FilerClient], Awaitable[T]]
) -> T:
    if filer is not None:
        return await action(filer)
    async with FilerClient(get_config().get_filer_config()) as owned:
        return await action(owned)


def handle_assign(cmd: AssignCommand, client: Optional[SeaweedClient] = None) -> str:
    """
    Handle 'assign' command.

    Args:
        cmd: AssignCommand with optional count and collection
        client: Optional SeaweedClient for dependency injection (testing)

    Returns:
        Assigned fid and volume server, or error message
    """
    async def action(c: SeaweedClient) -> str:
        assigned = await c.assign(AssignParams(count=cmd.count, collection=cmd.collection))
        return f"Assigned {assigned.fid} on {assigned.url} (count={assigned.count})"

    return _run(lambda: _with_client(client, action))


def handle_upload(cmd: UploadCommand, client: Optional[SeaweedClient] = None) -> str:
    """
    Handle 'upload' command.

    Without a fid a new one is assigned; with a fid the object is overwritten
    on the volume server that holds it.

    Args:
        cmd: UploadCommand with file_path and optional fid
        client: Optional SeaweedClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    source = Path(cmd.file_path)
    if not source.is_file():
        return f"Error: {cmd.file_path} is not a file"

    logger.info(f"Executing upload command [file={cmd.file_path} fid={cmd.fid}]")
    payload = source.read_bytes()

    async def action(c: SeaweedClient) -> str:
        if cmd.fid:
            written = await c.update(cmd.fid, payload, source.name)
            fid = cmd.fid
        else:
            assigned, written = await c.upload(payload, source.name)
            fid = assigned.fid
        return f"Uploaded {source.name} as {fid} ({format_file_size(written.size)})"

    return _run(lambda: _with_client(client, action))


def handle_download(cmd: DownloadCommand, client: Optional[SeaweedClient] = None) -> str:
    """
    Handle 'download' command.

    The object is streamed to disk chunk by chunk.

    Args:
        cmd: DownloadCommand with fid and optional output_path
        client: Optional SeaweedClient for dependency injection (testing)

    Returns:
        Success or error message with download results
    """
    target = Path(cmd.output_path) if cmd.output_path else Path(DOWNLOADS_DIR) / cmd.fid.replace(",", "_")
    logger.info(f"Executing download command [fid={cmd.fid} output={target}]")

    async def action(c: SeaweedClient) -> str:
        stream = await c.get_stream(cmd.fid)
        target.parent.mkdir(parents=True, exist_ok=True)
        written = 0
        try:
            async with stream:
                with open(target, 'wb') as f:
                    async for chunk in stream:
                        f.write(chunk)
                        written += len(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            logger.debug(f"Removed partial download [path={target}]")
            raise
        return f"Downloaded {cmd.fid} to {target} ({format_file_size(written)})"

    return _run(lambda: _with_client(client, action))


def handle_delete(cmd: DeleteCommand, client: Optional[SeaweedClient] = None) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with fid
        client: Optional SeaweedClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    async def action(c: SeaweedClient) -> str:
        deleted = await c.delete(cmd.fid)
        return f"Deleted {cmd.fid} ({format_file_size(deleted.size)})"

    return _run(lambda: _with_client(client, action))


def handle_lookup(cmd: LookupCommand, client: Optional[SeaweedClient] = None) -> str:
    """
    Handle 'lookup' command.

    Args:
        cmd: LookupCommand with a volume id or fid
        client: Optional SeaweedClient for dependency injection (testing)

    Returns:
        Volume locations, or error message
    """
    async def action(c: SeaweedClient) -> str:
        volume_id = int(cmd.target) if cmd.target.isascii() and cmd.target.isdigit() else parse_volume_id(cmd.target)
        locations = await c.resolve(volume_id)
        return format_locations(volume_id, locations)

    return _run(lambda: _with_client(client, action))


def handle_list(cmd: ListCommand, filer: Optional[FilerClient] = None) -> str:
    """
    Handle 'ls' command.

    Args:
        cmd: ListCommand with path, optional page size and name pattern
        filer: Optional FilerClient for dependency injection (testing)

    Returns:
        Formatted directory listing
    """
    logger.info(f"Executing ls command [path={cmd.path}]")

    async def action(f: FilerClient) -> str:
        entries = await f.list_files(cmd.path, limit=cmd.limit, name_pattern=cmd.name_pattern)
        if not entries:
            return f"{cmd.path}: empty"
        lines = [f"{cmd.path}: {len(entries)} entries"]
        lines.extend(format_entry(entry) for entry in entries)
        return "\n".join(lines)

    return _run(lambda: _with_filer(filer, action))


def handle_tag(cmd: TagCommand, filer: Optional[FilerClient] = None) -> str:
    """
    Handle 'tag' command.

    Args:
        cmd: TagCommand with path and key/value pairs
        filer: Optional FilerClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    async def action(f: FilerClient) -> str:
        await f.set_tags(cmd.path, dict(cmd.tags))
        return f"Tagged {cmd.path} with {', '.join(key for key, _ in cmd.tags)}"

    return _run(lambda: _with_filer(filer, action))


def handle_untag(cmd: UntagCommand, filer: Optional[FilerClient] = None) -> str:
    """
    Handle 'untag' command.

    Args:
        cmd: UntagCommand with path and tag names (empty removes all)
        filer: Optional FilerClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    async def action(f: FilerClient) -> str:
        await f.remove_tags(cmd.path, list(cmd.tag_names))
        if not cmd.tag_names:
            return f"Removed all tags from {cmd.path}"
        return f"Removed {', '.join(cmd.tag_names)} from {cmd.path}"

    return _run(lambda: _with_filer(filer, action))


def handle_status(cmd: StatusCommand, client: Optional[SeaweedClient] = None) -> str:
    """
    Handle 'status' command.

    Args:
        cmd: StatusCommand
        client: Optional SeaweedClient for dependency injection (testing)

    Returns:
        Leader, peers and health code of the cluster
    """
    async def action(c: SeaweedClient) -> str:
        status = await c.system_status()
        health = await c.system_health()
        peers = ", ".join(status.peers or []) or "none"
        return (
            f"Leader: {status.leader or 'unknown'}\n"
            f"Peers: {peers}\n"
            f"Health: {health}"
        )

    return _run(lambda: _with_client(client, action))
