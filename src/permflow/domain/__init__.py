"""Domain layer: platform-independent permission models."""

from permflow.domain.models import PermissionCategory, PermissionStatus

__all__ = ["PermissionCategory", "PermissionStatus"]
