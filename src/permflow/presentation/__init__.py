"""Presentation layer: UI states, the state machine and the UI reactor."""

from permflow.presentation.events import (
    APP_TOPIC,
    PermissionStateChanged,
    SessionStateChanged,
    state_topic,
)
from permflow.presentation.machine import PermissionStateMachine
from permflow.presentation.platform import MockPlatformActions, PlatformActions
from permflow.presentation.reactor import UiReactor
from permflow.presentation.state import (
    ApplicationState,
    Checking,
    Denied,
    Granted,
    Idle,
    NotRequired,
    PermanentlyDenied,
    PermissionUiState,
    RequestPermission,
    ShowRationale,
    status_to_ui_state,
)

__all__ = [
    "APP_TOPIC",
    "ApplicationState",
    "Checking",
    "Denied",
    "Granted",
    "Idle",
    "MockPlatformActions",
    "NotRequired",
    "PermanentlyDenied",
    "PermissionStateChanged",
    "PermissionStateMachine",
    "PermissionUiState",
    "PlatformActions",
    "RequestPermission",
    "SessionStateChanged",
    "ShowRationale",
    "UiReactor",
    "state_topic",
    "status_to_ui_state",
]
