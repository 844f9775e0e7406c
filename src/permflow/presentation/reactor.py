"""UI reactor: performs platform actions for published permission states."""

from __future__ import annotations

from typing import Callable

from permflow.common.events import Event
from permflow.common.logging import get_logger
from permflow.data.camera import CameraManager
from permflow.domain.models import PermissionCategory
from permflow.presentation.events import PermissionStateChanged, SessionStateChanged
from permflow.presentation.machine import PermissionStateMachine
from permflow.presentation.platform import PlatformActions
from permflow.presentation.state import (
    Checking,
    Granted,
    NotRequired,
    RequestPermission,
)

CAPTURE_FILE_ERROR = "Não foi possível criar o arquivo para a foto."


class UiReactor:
    """Feeds platform results back into the state machine.

    - RequestPermission: launch the permission dialog (or, when nothing must
      be requested, go straight to the operation).
    - Granted / NotRequired right after a check or prompt: run the operation.
    - A settings request: open system settings.

    ShowRationale and PermanentlyDenied wait for the user's dialog answer.
    While a picker or the camera is open the session is marked loading.
    """

    def __init__(
        self,
        machine: PermissionStateMachine,
        platform: PlatformActions,
        camera_manager: CameraManager | None = None,
    ) -> None:
        self.machine = machine
        self.platform = platform
        self.camera_manager = camera_manager
        self._unsubscribe: Callable[[], None] | None = None
        self.logger = get_logger("ui_reactor")

    def attach(self) -> None:
        """Start reacting to state changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.machine.events.subscribe("permissions.*", self.handle)

    def detach(self) -> None:
        """Stop reacting to state changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def handle(self, event: Event) -> None:
        try:
            if isinstance(event, PermissionStateChanged):
                await self._on_permission_state(event)
            elif isinstance(event, SessionStateChanged) and event.settings_request is not None:
                await self._on_settings_request(event.settings_request)
        except Exception as e:
            self.logger.exception("reaction_failed", topic=event.topic, error=str(e))
            await self.machine.report_error(str(e))

    async def _on_permission_state(self, event: PermissionStateChanged) -> None:
        category = event.category

        if isinstance(event.state, RequestPermission):
            permissions = self.machine.get_concrete_permission_identifiers(category)
            if not permissions:
                await self._run_operation(category)
                return

            granted, rationale = await self.platform.launch_permission_dialog(
                category, permissions
            )
            await self.machine.apply_permission_result(category, granted, rationale)

        elif isinstance(event.state, (Granted, NotRequired)) and isinstance(
            event.previous, (Checking, RequestPermission)
        ):
            await self._run_operation(category)

    async def _on_settings_request(self, category: PermissionCategory) -> None:
        # Consume the request first so a failing open is not retried forever
        await self.machine.settings_opened()
        await self.platform.open_settings(category)
        self.logger.info("settings_opened", category=category.value)

    async def _run_operation(self, category: PermissionCategory) -> None:
        uri: str | None = None
        if category is PermissionCategory.CAMERA:
            if self.camera_manager is None:
                raise RuntimeError("Camera capture needs a CameraManager")

            uri = self.camera_manager.create_image_uri()
            if uri is None:
                await self.machine.report_error(CAPTURE_FILE_ERROR)
                await self.machine.reset_state(category)
                return

        await self.machine.set_loading(True)
        try:
            if category is PermissionCategory.CAMERA:
                captured = await self.platform.take_picture(uri)
                resource_ref = uri if captured else None
            else:
                resource_ref = await self.platform.launch_picker(category)
        finally:
            await self.machine.set_loading(False)

        await self.machine.record_operation_result(category, resource_ref)
