"""Data layer: platform repositories, camera storage and file helpers."""

from permflow.data.camera import CameraManager
from permflow.data.files import format_file_size, get_file_name, get_file_size
from permflow.data.repository import (
    MockPermissionRepository,
    PermissionRepository,
    PlatformPermissionRepository,
    resolve_permissions,
)

__all__ = [
    "CameraManager",
    "MockPermissionRepository",
    "PermissionRepository",
    "PlatformPermissionRepository",
    "resolve_permissions",
    "format_file_size",
    "get_file_name",
    "get_file_size",
]
