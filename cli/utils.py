"""Utility functions for CLI operations."""

from typing import Iterable

from seaweed.models import FilerEntry, VolumeLocation


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_entry(entry: FilerEntry) -> str:
    """Render one listing line: directories end with '/', files show their size."""
    if entry.is_directory:
        return f"  {entry.name}/"
    return f"  {entry.name}  ({format_file_size(entry.file_size)})"


def format_locations(volume_id: int, locations: Iterable[VolumeLocation]) -> str:
    lines = [f"Volume {volume_id}:"]
    for location in locations:
        line = f"  {location.url}"
        if location.public_url and location.public_url != location.url:
            line += f" (public {location.public_url})"
        if location.data_center:
            line += f" [dc={location.data_center}]"
        lines.append(line)
    return "\n".join(lines)
