"""Command parser for CLI input."""

import shlex

from cli.models import (
    AssignCommand,
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LookupCommand,
    StatusCommand,
    TagCommand,
    UntagCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of the command dataclasses in cli.models)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]

    if command_name == "assign":
        return _parse_assign(tokens[1:])
    elif command_name == "upload":
        return _parse_upload(tokens[1:])
    elif command_name == "download":
        return _parse_download(tokens[1:])
    elif command_name == "delete":
        return _parse_delete(tokens[1:])
    elif command_name == "lookup":
        return _parse_lookup(tokens[1:])
    elif command_name == "ls":
        return _parse_ls(tokens[1:])
    elif command_name == "tag":
        return _parse_tag(tokens[1:])
    elif command_name == "untag":
        return _parse_untag(tokens[1:])
    elif command_name == "status":
        return _parse_status(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_positive_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ParseError(f"{name} must be an integer, got '{value}'")
    if number < 1:
        raise ParseError(f"{name} must be at least 1")
    return number


def _parse_assign(args: list[str]) -> AssignCommand:
    """Parse 'assign [count] [collection]' command."""
    if len(args) > 2:
        raise ParseError("assign takes at most 2 arguments: [count] [collection]")

    count = _parse_positive_int(args[0], "count") if args else None
    collection = args[1] if len(args) > 1 else None
    return AssignCommand(count=count, collection=collection)


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <file_path> [fid]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("upload requires 1 or 2 arguments: <file_path> [fid]")

    return UploadCommand(file_path=args[0], fid=args[1] if len(args) > 1 else None)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <fid> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires 1 or 2 arguments: <fid> [output_path]")

    return DownloadCommand(fid=args[0], output_path=args[1] if len(args) > 1 else None)


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <fid>' command."""
    if len(args) != 1:
        raise ParseError("delete requires exactly 1 argument: <fid>")

    return DeleteCommand(fid=args[0])


def _parse_lookup(args: list[str]) -> LookupCommand:
    """Parse 'lookup <volume_id|fid>' command."""
    if len(args) != 1:
        raise ParseError("lookup requires exactly 1 argument: <volume_id|fid>")

    return LookupCommand(target=args[0])


def _parse_ls(args: list[str]) -> ListCommand:
    """Parse 'ls [path] [limit] [pattern]' command."""
    if len(args) > 3:
        raise ParseError("ls takes at most 3 arguments: [path] [limit] [pattern]")

    path = args[0] if args else "/"
    limit = _parse_positive_int(args[1], "limit") if len(args) > 1 else None
    name_pattern = args[2] if len(args) > 2 else None
    return ListCommand(path=path, limit=limit, name_pattern=name_pattern)


def _parse_tag(args: list[str]) -> TagCommand:
    """Parse 'tag <path> key=value [key=value ...]' command."""
    if len(args) < 2:
        raise ParseError("tag requires a path and at least one key=value pair")

    tags = []
    for pair in args[1:]:
        key, separator, value = pair.partition("=")
        if not separator or not key:
            raise ParseError(f"Invalid tag '{pair}', expected key=value")
        tags.append((key, value))

    return TagCommand(path=args[0], tags=tuple(tags))


def _parse_untag(args: list[str]) -> UntagCommand:
    """Parse 'untag <path> [name ...]' command."""
    if not args:
        raise ParseError("untag requires a path")

    return UntagCommand(path=args[0], tag_names=tuple(args[1:]))


def _parse_status(args: list[str]) -> StatusCommand:
    if args:
        raise ParseError("status takes no arguments")
    return StatusCommand()
