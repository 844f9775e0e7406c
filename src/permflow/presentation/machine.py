"""Permission state machine.

Owns the session's ApplicationState and turns user actions and platform
results into PermissionUiState transitions:

1. The user triggers an action; ``request_action`` moves the category to
   Checking and queries the repository.
2. The status is mapped to a UI state (Granted, RequestPermission, ...).
3. The UI reacts: proceeds, or launches the platform permission dialog.
4. The dialog result comes back through ``apply_permission_result``, which
   yields Granted, ShowRationale or PermanentlyDenied.
5. Dialog buttons come back as ``dialog_confirmed`` / ``dialog_dismissed``.

Every transition replaces the snapshot in one assignment and is then
published on the event bus, so observers never see a half-applied update.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from permflow.common.events import EventBus
from permflow.common.logging import get_logger
from permflow.config import MessagesConfig
from permflow.data.repository import PermissionRepository
from permflow.domain.models import PermissionCategory
from permflow.presentation.events import PermissionStateChanged, SessionStateChanged
from permflow.presentation.state import (
    ApplicationState,
    Checking,
    Denied,
    Granted,
    Idle,
    PermanentlyDenied,
    PermissionUiState,
    RequestPermission,
    ShowRationale,
    status_to_ui_state,
)

StateListener = Callable[[ApplicationState], None]


class PermissionStateMachine:
    """Single owner of the permission UI state for one session."""

    def __init__(
        self,
        repository: PermissionRepository,
        messages: MessagesConfig | None = None,
        event_bus: EventBus | None = None,
        source: str = "permflow",
    ) -> None:
        """Initialize the state machine.

        Args:
            repository: Status source and requirement resolver.
            messages: User-facing texts; defaults when None.
            event_bus: Bus to publish transitions on; a private one when None.
            source: Event source identifier.
        """
        self.repository = repository
        self.messages = messages or MessagesConfig()
        self.events = event_bus or EventBus()
        self.source = source
        self._state = ApplicationState()
        self._listeners: list[StateListener] = []
        self.logger = get_logger("permission_state_machine", source=source)

    @property
    def state(self) -> ApplicationState:
        """Current state snapshot."""
        return self._state

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot.

        Returns:
            Function removing the listener.
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def rationale_message(self, category: PermissionCategory) -> str:
        """Text shown after a denial, per category."""
        return getattr(self.messages, f"{category.value}_rationale")

    def settings_message(self, category: PermissionCategory) -> str:
        """Text shown when a status check reports a blocked permission."""
        return getattr(self.messages, f"{category.value}_settings")

    # Transitions

    async def request_action(self, category: PermissionCategory) -> PermissionUiState:
        """Handle the user asking for the feature behind ``category``.

        A call while the category is already Checking restarts the check;
        whichever check completes last decides the state.
        """
        await self._set_permission(category, Checking())
        self.logger.info("permission_check_started", category=category.value)

        try:
            status = await self.repository.check_status(category)
        except Exception as e:
            self.logger.exception(
                "permission_check_failed",
                category=category.value,
                error=str(e),
            )
            ui_state: PermissionUiState = Denied(self.messages.status_error)
        else:
            ui_state = status_to_ui_state(status, self.settings_message(category))
            self.logger.info(
                "permission_checked",
                category=category.value,
                status=status.value,
                ui_state=ui_state.kind,
            )

        await self._set_permission(category, ui_state)
        return ui_state

    async def apply_permission_result(
        self,
        category: PermissionCategory,
        granted: bool,
        should_show_rationale: bool,
    ) -> PermissionUiState:
        """Handle the answer to the platform permission dialog.

        Args:
            category: Category that was requested.
            granted: Whether the user granted the permission.
            should_show_rationale: Platform hint that the user can still be asked.
        """
        ui_state: PermissionUiState
        if granted:
            ui_state = Granted()
        elif should_show_rationale:
            ui_state = ShowRationale(self.rationale_message(category))
        else:
            ui_state = PermanentlyDenied(self.rationale_message(category))

        self.logger.info(
            "permission_result",
            category=category.value,
            granted=granted,
            should_show_rationale=should_show_rationale,
            ui_state=ui_state.kind,
        )
        await self._set_permission(category, ui_state)
        return ui_state

    async def record_operation_result(
        self,
        category: PermissionCategory,
        resource_ref: str | None,
    ) -> None:
        """Store the outcome of the picker or camera and mark the category Granted."""
        self.logger.info(
            "operation_result",
            category=category.value,
            has_result=resource_ref is not None,
        )
        new_state = self._state.with_result(category, resource_ref).with_permission(
            category, Granted()
        )
        await self._commit(new_state, category)

    async def reset_state(self, category: PermissionCategory) -> None:
        """Return a category to Idle so its flow can start over."""
        await self._set_permission(category, Idle())

    async def dialog_confirmed(self, category: PermissionCategory) -> None:
        """Handle the positive button of the rationale or settings dialog.

        From ShowRationale the permission is requested again; from
        PermanentlyDenied the UI is asked to open system settings.
        """
        current = self._state.permission(category)

        if isinstance(current, ShowRationale):
            await self._set_permission(category, RequestPermission())
        elif isinstance(current, PermanentlyDenied):
            await self.open_settings(category)
        else:
            self.logger.debug(
                "dialog_confirm_ignored",
                category=category.value,
                ui_state=current.kind,
            )

    async def dialog_dismissed(self, category: PermissionCategory) -> None:
        """Handle the dialog being cancelled."""
        await self.reset_state(category)

    async def open_settings(self, category: PermissionCategory) -> None:
        """Ask the UI to open system settings for ``category``."""
        self.logger.info("settings_requested", category=category.value)
        await self._commit(replace(self._state, settings_request=category))

    async def settings_opened(self) -> None:
        """Acknowledge that system settings were opened."""
        await self._commit(replace(self._state, settings_request=None))

    async def recheck_permission(self, category: PermissionCategory) -> PermissionUiState:
        """Check a category again, e.g. after returning from system settings."""
        if self._state.settings_request is category:
            await self.settings_opened()
        return await self.request_action(category)

    async def report_error(self, message: str) -> None:
        """Surface an unexpected condition to the UI."""
        await self._commit(replace(self._state, error_message=message))

    async def clear_error(self) -> None:
        await self._commit(replace(self._state, error_message=None))

    async def set_loading(self, loading: bool) -> None:
        """Flag a picker or camera operation as in progress."""
        await self._commit(replace(self._state, is_loading=loading))

    def get_concrete_permission_identifiers(self, category: PermissionCategory) -> list[str]:
        """Platform permissions the UI must request for ``category``."""
        return self.repository.get_required_permissions(category)

    # Internals

    async def _set_permission(
        self, category: PermissionCategory, ui_state: PermissionUiState
    ) -> None:
        await self._commit(self._state.with_permission(category, ui_state), category)

    async def _commit(
        self,
        new_state: ApplicationState,
        category: PermissionCategory | None = None,
    ) -> None:
        previous = self._state
        self._state = new_state

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                self.logger.exception("state_listener_error", error=str(e))

        if category is None:
            await self.events.publish(SessionStateChanged(snapshot=new_state, source=self.source))
            return

        ui_state = new_state.permission(category)
        self.logger.debug(
            "permission_state_changed",
            category=category.value,
            previous=previous.permission(category).kind,
            ui_state=ui_state.kind,
        )
        await self.events.publish(
            PermissionStateChanged(
                category=category,
                state=ui_state,
                previous=previous.permission(category),
                snapshot=new_state,
                source=self.source,
            )
        )
