"""File identifier (fid) parsing.

A fid looks like ``3,01637037d6``: the decimal volume id, a comma, then the
hex file key immediately followed by an 8 hex digit cookie. Assignments with
``count > 1`` hand out ``<fid>_<n>`` for the additional files.
"""

import re
from dataclasses import dataclass

from common.constants import (
    COOKIE_HEX_DIGITS,
    FID_DELIMITER,
    MAX_FILE_KEY_HEX_DIGITS,
    MAX_VOLUME_ID,
)
from seaweed.exceptions import MalformedIdentifier

_KEY_COOKIE_RE = re.compile(
    rf"^(?P<key>[0-9a-fA-F]{{1,{MAX_FILE_KEY_HEX_DIGITS}}})"
    rf"(?P<cookie>[0-9a-fA-F]{{{COOKIE_HEX_DIGITS}}})"
    r"(?:_(?P<delta>\d+))?$"
)


def _split(identifier: str) -> tuple[str, str]:
    if not isinstance(identifier, str):
        raise MalformedIdentifier(str(identifier), "file id must be a string")

    head, sep, tail = identifier.strip().partition(FID_DELIMITER)
    if not sep:
        raise MalformedIdentifier(identifier, f"missing '{FID_DELIMITER}' delimiter")
    if not head:
        raise MalformedIdentifier(identifier, "missing volume id")
    if not tail:
        raise MalformedIdentifier(identifier, "missing file key")
    return head, tail


def _parse_volume(identifier: str, head: str) -> int:
    # str.isdigit() accepts unicode digits like '²'; only ASCII is valid here
    if not (head.isascii() and head.isdigit()):
        raise MalformedIdentifier(identifier, f"volume id {head!r} is not an unsigned integer")
    volume_id = int(head)
    if volume_id > MAX_VOLUME_ID:
        raise MalformedIdentifier(identifier, f"volume id {volume_id} out of range")
    return volume_id


def parse_volume_id(identifier: str) -> int:
    """
    Extract the volume id from a file identifier.

    Args:
        identifier: File id, e.g. "3,01637037d6"

    Returns:
        Volume id as an unsigned integer

    Raises:
        MalformedIdentifier: If the prefix is absent, non-numeric or out of range
    """
    head, _ = _split(identifier)
    return _parse_volume(identifier, head)


@dataclass(frozen=True)
class FileId:
    """
    Decoded file identifier issued by the master.
    """
    volume_id: int
    file_key: int
    cookie: int
    delta: int = 0

    @classmethod
    def parse(cls, identifier: str) -> "FileId":
        """
        Fully decode a file identifier.

        Raises:
            MalformedIdentifier: If any component is malformed
        """
        head, tail = _split(identifier)
        volume_id = _parse_volume(identifier, head)

        match = _KEY_COOKIE_RE.match(tail)
        if match is None:
            raise MalformedIdentifier(identifier, f"file key {tail!r} is not <hex key><8 hex cookie>")

        delta = match.group("delta")
        return cls(
            volume_id=volume_id,
            file_key=int(match.group("key"), 16),
            cookie=int(match.group("cookie"), 16),
            delta=int(delta) if delta else 0,
        )

    def __str__(self) -> str:
        # the key is rendered as whole bytes with leading zero bytes dropped
        key_hex = f"{self.file_key:x}"
        key_hex = key_hex.zfill(len(key_hex) + len(key_hex) % 2)
        fid = f"{self.volume_id}{FID_DELIMITER}{key_hex}{self.cookie:0{COOKIE_HEX_DIGITS}x}"
        if self.delta:
            fid += f"_{self.delta}"
        return fid
