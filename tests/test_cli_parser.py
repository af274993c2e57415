"""Tests for CLI command parsing."""

import pytest

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
from cli.parser import ParseError, parse_command


@pytest.mark.parametrize("line,expected", [
    ("assign", AssignCommand()),
    ("assign 3 pics", AssignCommand(count=3, collection="pics")),
    ("upload 'my file.txt'", UploadCommand(file_path="my file.txt")),
    ("upload a.txt 3,01637037d6", UploadCommand(file_path="a.txt", fid="3,01637037d6")),
    ("download 3,01637037d6", DownloadCommand(fid="3,01637037d6")),
    ("download 3,01637037d6 out.bin", DownloadCommand(fid="3,01637037d6", output_path="out.bin")),
    ("delete 3,01637037d6", DeleteCommand(fid="3,01637037d6")),
    ("lookup 3", LookupCommand(target="3")),
    ("ls", ListCommand(path="/")),
    ("ls /docs 50 *.pdf", ListCommand(path="/docs", limit=50, name_pattern="*.pdf")),
    ("tag /a Seaweed-Owner=alice Seaweed-Note=a=b",
     TagCommand(path="/a", tags=(("Seaweed-Owner", "alice"), ("Seaweed-Note", "a=b")))),
    ("untag /a", UntagCommand(path="/a")),
    ("untag /a Seaweed-A Seaweed-B", UntagCommand(path="/a", tag_names=("Seaweed-A", "Seaweed-B"))),
    ("status", StatusCommand()),
])
def test_parse_valid_commands(line, expected):
    assert parse_command(line) == expected


@pytest.mark.parametrize("line,message", [
    ("", "Empty command"),
    ("   ", "Empty command"),
    ("frobnicate", "Unknown command"),
    ("upload", "upload requires"),
    ("download", "download requires"),
    ("delete", "delete requires"),
    ("delete a b", "delete requires"),
    ("lookup", "lookup requires"),
    ("assign zero", "count must be an integer"),
    ("assign 0", "count must be at least 1"),
    ("ls /docs -5", "limit must be at least 1"),
    ("tag /a", "tag requires"),
    ("tag /a novalue", "Invalid tag 'novalue'"),
    ("tag /a =x", "Invalid tag '=x'"),
    ("untag", "untag requires"),
    ("status now", "status takes no arguments"),
    ("upload 'unterminated", "Invalid syntax"),
])
def test_parse_errors(line, message):
    with pytest.raises(ParseError, match=message):
        parse_command(line)
