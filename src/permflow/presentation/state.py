"""UI-facing permission states and the application state snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from permflow.domain.models import PermissionCategory, PermissionStatus


@dataclass(frozen=True)
class PermissionUiState:
    """Base class for what the UI should currently do for a category."""

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str | None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class Idle(PermissionUiState):
    """No permission flow in progress."""


@dataclass(frozen=True)
class Checking(PermissionUiState):
    """A status query is in flight."""


@dataclass(frozen=True)
class Granted(PermissionUiState):
    """Permission usable; proceed with the operation."""


@dataclass(frozen=True)
class RequestPermission(PermissionUiState):
    """Launch the platform permission dialog."""


@dataclass(frozen=True)
class ShowRationale(PermissionUiState):
    """Explain why the permission is needed before asking again."""

    text: str = ""

    @property
    def message(self) -> str:
        return self.text


@dataclass(frozen=True)
class Denied(PermissionUiState):
    """Permission could not be obtained; show an error."""

    text: str = ""

    @property
    def message(self) -> str:
        return self.text


@dataclass(frozen=True)
class PermanentlyDenied(PermissionUiState):
    """Blocked by the user; offer to open system settings."""

    text: str = ""

    @property
    def message(self) -> str:
        return self.text


@dataclass(frozen=True)
class NotRequired(PermissionUiState):
    """No grant needed on this platform version."""


def status_to_ui_state(status: PermissionStatus, message: str = "") -> PermissionUiState:
    """Map a platform status to the state the UI should react to.

    Args:
        status: Status reported by the repository.
        message: Text carried by PermanentlyDenied.
    """
    if status is PermissionStatus.GRANTED:
        return Granted()
    if status is PermissionStatus.DENIED:
        return RequestPermission()
    if status is PermissionStatus.PERMANENTLY_DENIED:
        return PermanentlyDenied(message)
    return NotRequired()


# Operation result slot per category
RESULT_FIELDS: dict[PermissionCategory, str] = {
    PermissionCategory.GALLERY: "selected_image",
    PermissionCategory.CAMERA: "camera_image",
    PermissionCategory.FILE_PICKER: "selected_file",
}


def _idle_permissions() -> dict[PermissionCategory, PermissionUiState]:
    return {category: Idle() for category in PermissionCategory}


@dataclass(frozen=True)
class ApplicationState:
    """Immutable snapshot of the session state.

    A new snapshot replaces the old one on every transition.
    """

    permissions: dict[PermissionCategory, PermissionUiState] = field(
        default_factory=_idle_permissions
    )
    selected_image: str | None = None
    selected_file: str | None = None
    camera_image: str | None = None
    is_loading: bool = False
    error_message: str | None = None
    settings_request: PermissionCategory | None = None

    def permission(self, category: PermissionCategory) -> PermissionUiState:
        """Get the UI state of a category."""
        return self.permissions[category]

    def with_permission(
        self, category: PermissionCategory, ui_state: PermissionUiState
    ) -> ApplicationState:
        """Return a copy with one category's UI state replaced."""
        permissions = dict(self.permissions)
        permissions[category] = ui_state
        return replace(self, permissions=permissions)

    def with_result(
        self, category: PermissionCategory, resource_ref: str | None
    ) -> ApplicationState:
        """Return a copy with the category's operation result replaced."""
        return replace(self, **{RESULT_FIELDS[category]: resource_ref})

    def result_for(self, category: PermissionCategory) -> str | None:
        """Get the stored operation result of a category."""
        return getattr(self, RESULT_FIELDS[category])

    def has_selected_image(self) -> bool:
        return self.selected_image is not None or self.camera_image is not None

    def current_image(self) -> str | None:
        """Image to display; the camera capture wins over the gallery pick."""
        return self.camera_image if self.camera_image is not None else self.selected_image

    def to_dict(self) -> dict[str, Any]:
        return {
            "permissions": {
                category.value: ui_state.to_dict()
                for category, ui_state in self.permissions.items()
            },
            "selected_image": self.selected_image,
            "selected_file": self.selected_file,
            "camera_image": self.camera_image,
            "is_loading": self.is_loading,
            "error_message": self.error_message,
            "settings_request": self.settings_request.value if self.settings_request else None,
        }
