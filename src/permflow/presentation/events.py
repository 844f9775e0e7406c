"""Events published by the permission state machine."""

from __future__ import annotations

from dataclasses import dataclass

from permflow.common.events import Event
from permflow.domain.models import PermissionCategory
from permflow.presentation.state import ApplicationState, PermissionUiState

APP_TOPIC = "permissions.app.state"


def state_topic(category: PermissionCategory) -> str:
    """Event topic carrying a category's state changes."""
    return f"permissions.{category.value}.state"


@dataclass(kw_only=True)
class PermissionStateChanged(Event):
    """A category moved from ``previous`` to ``state``."""

    category: PermissionCategory
    state: PermissionUiState
    previous: PermissionUiState
    snapshot: ApplicationState

    @property
    def topic(self) -> str:
        return state_topic(self.category)


@dataclass(kw_only=True)
class SessionStateChanged(Event):
    """Session-wide fields changed (settings request, error, loading)."""

    snapshot: ApplicationState

    @property
    def topic(self) -> str:
        return APP_TOPIC

    @property
    def settings_request(self) -> PermissionCategory | None:
        return self.snapshot.settings_request
