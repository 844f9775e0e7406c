"""Helpers for picked file references."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from urllib.parse import unquote, urlparse

# Looks up provider metadata for a content reference, e.g.
# {"display_name": "report.pdf", "size": 1024}; None when unknown.
MetadataResolver = Callable[[str], dict[str, Any] | None]


def _last_segment(path: str) -> str | None:
    if not path:
        return None
    cut = path.rfind("/")
    if cut == -1:
        return path
    return path[cut + 1 :] or None


def get_file_name(uri: str, resolver: MetadataResolver | None = None) -> str | None:
    """Extract a display name from a file reference.

    Args:
        uri: ``content://`` or ``file://`` reference.
        resolver: Optional provider metadata lookup for content references.

    Returns:
        File name, or None if it cannot be determined.
    """
    parsed = urlparse(uri)
    path = unquote(parsed.path)
    result: str | None = None

    if parsed.scheme == "content":
        if resolver is not None:
            metadata = resolver(uri) or {}
            result = metadata.get("display_name")
        if result is None and "/" in path:
            result = _last_segment(path)

    if result is None and parsed.scheme == "file" and path:
        result = Path(path).name

    if result is None:
        result = _last_segment(path)

    return result


def get_file_size(uri: str, resolver: MetadataResolver | None = None) -> int | None:
    """Get the size in bytes of a file reference, or None if unknown."""
    parsed = urlparse(uri)

    if parsed.scheme == "content" and resolver is not None:
        metadata = resolver(uri) or {}
        size = metadata.get("size")
        if size is not None and size > 0:
            return int(size)

    if parsed.scheme == "file":
        path = Path(unquote(parsed.path))
        if path.exists():
            return path.stat().st_size

    return None


def format_file_size(size: int) -> str:
    """Format a byte count for display (e.g. "1.50 MB", "500 bytes")."""
    kb = size / 1024.0
    mb = kb / 1024.0
    gb = mb / 1024.0

    if gb >= 1:
        return f"{gb:.2f} GB"
    if mb >= 1:
        return f"{mb:.2f} MB"
    if kb >= 1:
        return f"{kb:.2f} KB"
    return f"{size} bytes"
