"""Platform actions the UI performs in reaction to permission states."""

from __future__ import annotations

import io
from collections import deque

from permflow.common.logging import get_logger
from permflow.data.camera import CameraManager
from permflow.domain.models import PermissionCategory

DEFAULT_PICKS: dict[PermissionCategory, str] = {
    PermissionCategory.GALLERY: "content://media/picker/0/com.android.providers.media.photopicker/media/1000",
    PermissionCategory.FILE_PICKER: "content://com.android.providers.downloads.documents/document/msf%3A42",
}


class PlatformActions:
    """Abstract platform integration (dialogs, pickers, camera, settings)."""

    async def launch_permission_dialog(
        self,
        category: PermissionCategory,
        permissions: list[str],
    ) -> tuple[bool, bool]:
        """Show the system permission prompt.

        Returns:
            (granted, should_show_rationale)
        """
        raise NotImplementedError

    async def launch_picker(self, category: PermissionCategory) -> str | None:
        """Open the gallery or file picker; None when the user cancels."""
        raise NotImplementedError

    async def take_picture(self, uri: str) -> bool:
        """Capture a photo into ``uri``; False when the capture was cancelled."""
        raise NotImplementedError

    async def open_settings(self, category: PermissionCategory) -> None:
        """Open the app's system settings page."""
        raise NotImplementedError


class MockPlatformActions(PlatformActions):
    """Scripted platform for tests and demos.

    Prompt answers are consumed in order per category; with none queued the
    user grants the permission.
    """

    def __init__(self, camera_manager: CameraManager | None = None) -> None:
        self.camera_manager = camera_manager
        self._prompt_answers: dict[PermissionCategory, deque[tuple[bool, bool]]] = {}
        self._picks: dict[PermissionCategory, str | None] = dict(DEFAULT_PICKS)
        self.capture_succeeds = True
        self.calls: list[tuple[str, PermissionCategory | str]] = []
        self.logger = get_logger("mock_platform")

    def queue_prompt(
        self,
        category: PermissionCategory,
        granted: bool,
        should_show_rationale: bool = False,
    ) -> None:
        """Queue the user's answer to the next prompt for ``category``."""
        self._prompt_answers.setdefault(category, deque()).append(
            (granted, should_show_rationale)
        )

    def set_pick(self, category: PermissionCategory, resource_ref: str | None) -> None:
        """Set what the picker returns for ``category`` (None = cancelled)."""
        self._picks[category] = resource_ref

    async def launch_permission_dialog(
        self,
        category: PermissionCategory,
        permissions: list[str],
    ) -> tuple[bool, bool]:
        self.calls.append(("permission_dialog", category))
        answers = self._prompt_answers.get(category)
        answer = answers.popleft() if answers else (True, False)
        self.logger.debug(
            "mock_permission_dialog",
            category=category.value,
            permissions=permissions,
            granted=answer[0],
        )
        return answer

    async def launch_picker(self, category: PermissionCategory) -> str | None:
        self.calls.append(("picker", category))
        return self._picks.get(category)

    async def take_picture(self, uri: str) -> bool:
        self.calls.append(("camera", uri))
        if not self.capture_succeeds:
            return False

        path = self.camera_manager.path_for(uri) if self.camera_manager else None
        if path is not None:
            from PIL import Image

            img = Image.new("RGB", (640, 480), color=(73, 109, 137))
            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=85)
            path.write_bytes(buffer.getvalue())

        return True

    async def open_settings(self, category: PermissionCategory) -> None:
        self.calls.append(("settings", category))
