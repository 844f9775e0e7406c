"""Domain models shared by every layer."""

from __future__ import annotations

from enum import Enum


class PermissionCategory(str, Enum):
    """Feature whose runtime permission is tracked.

    The concrete platform permissions behind each category depend on the
    platform version:

    - GALLERY: READ_MEDIA_IMAGES on API 33+, READ_EXTERNAL_STORAGE below.
      With the system photo picker no grant is needed.
    - CAMERA: CAMERA on every version.
    - FILE_PICKER: the storage access framework needs no explicit grant.
    """

    GALLERY = "gallery"
    CAMERA = "camera"
    FILE_PICKER = "file_picker"

    @classmethod
    def parse(cls, value: str) -> PermissionCategory:
        """Parse a category from its value or name, case-insensitively.

        Accepts "gallery", "GALLERY", "file-picker", "file_picker".

        Raises:
            ValueError: If no category matches.
        """
        normalized = value.strip().lower().replace("-", "_")
        for category in cls:
            if category.value == normalized:
                return category
        raise ValueError(f"Unknown permission category: {value}")


class PermissionStatus(str, Enum):
    """Platform ground truth for a category at one point in time."""

    # Already granted; proceed with the operation
    GRANTED = "granted"
    # Never asked, or denied but still askable; launch the request dialog
    DENIED = "denied"
    # Denied with "don't ask again"; only recoverable from system settings
    PERMANENTLY_DENIED = "permanently_denied"
    # No grant exists for this platform version
    NOT_REQUIRED = "not_required"
