"""Metadata tag validation.

Filer tags travel as HTTP headers and the filer only keeps headers whose name
starts with the Seaweed- prefix. Anything else would be silently dropped, so
requests carrying such keys are refused before they are built.
"""

from typing import Iterable, List, Mapping

from common.constants import TAG_PREFIX
from seaweed.exceptions import InvalidTag


def invalid_tag_keys(keys: Iterable[str]) -> List[str]:
    """Return every key lacking the tag prefix, in input order."""
    return [key for key in keys if not key.startswith(TAG_PREFIX)]


def validate_tags(tags: Mapping[str, str]) -> None:
    """
    Check that every tag key carries the namespace prefix.

    Args:
        tags: Tag name to value mapping

    Raises:
        InvalidTag: Listing all offending keys
    """
    offending = invalid_tag_keys(tags.keys())
    if offending:
        raise InvalidTag(offending, prefix=TAG_PREFIX)


def validate_tag_names(names: Iterable[str]) -> None:
    """
    Check tag names (without values), e.g. for tag removal.

    Raises:
        InvalidTag: Listing all offending names
    """
    offending = invalid_tag_keys(names)
    if offending:
        raise InvalidTag(offending, prefix=TAG_PREFIX)
