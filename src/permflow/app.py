"""App session - wires the permission flow for one UI session."""

from __future__ import annotations

from typing import Any

from permflow.common.events import EventBus
from permflow.common.logging import get_logger, setup_logging
from permflow.config import Config, load_config
from permflow.data.camera import CameraManager
from permflow.data.repository import (
    MockPermissionRepository,
    PermissionChecker,
    PermissionRepository,
    PlatformPermissionRepository,
)
from permflow.domain.models import PermissionCategory
from permflow.presentation.machine import PermissionStateMachine
from permflow.presentation.platform import MockPlatformActions, PlatformActions
from permflow.presentation.reactor import UiReactor
from permflow.presentation.state import ApplicationState


class App:
    """One UI session: state machine, collaborators and reactor.

    Collaborators are passed in explicitly; whatever is missing is built from
    the configuration (mock ones in mock mode).

    Example:
        async with App(config=config, platform=platform) as app:
            await app.take_photo()
            print(app.state.camera_image)
    """

    def __init__(
        self,
        config: Config | None = None,
        repository: PermissionRepository | None = None,
        platform: PlatformActions | None = None,
        checker: PermissionChecker | None = None,
        camera_manager: CameraManager | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Configuration (loaded from env/file if None).
            repository: Permission repository; built from ``checker`` or mocked if None.
            platform: Platform actions; mocked in mock mode if None.
            checker: Platform permission checker for the default repository.
            camera_manager: Capture file provisioning; built from config if None.
            event_bus: Bus for state changes; a fresh one if None.
        """
        self.config = config or load_config()

        setup_logging(
            level=self.config.app.log_level,
            json_output=self.config.app.mode == "production",
            session=self.config.app.name,
        )
        self.logger = get_logger(self.config.app.name)

        self.repository = repository or self._build_repository(checker)
        self.camera_manager = camera_manager or CameraManager(
            self.config.camera.pictures_dir,
            self.config.camera.authority,
        )
        self.events = event_bus or EventBus()
        self.machine = PermissionStateMachine(
            self.repository,
            messages=self.config.messages,
            event_bus=self.events,
            source=self.config.app.name,
        )

        if platform is None and self.config.mock_mode:
            platform = MockPlatformActions(self.camera_manager)
        self._platform = platform
        self._reactor: UiReactor | None = None
        self._started = False

    def _build_repository(self, checker: PermissionChecker | None) -> PermissionRepository:
        platform = self.config.platform
        if checker is not None:
            return PlatformPermissionRepository(
                checker,
                api_level=platform.api_level,
                photo_picker_enabled=platform.photo_picker_enabled,
            )
        if self.config.mock_mode:
            return MockPermissionRepository(
                api_level=platform.api_level,
                photo_picker_enabled=platform.photo_picker_enabled,
            )
        raise ValueError("A permission checker or repository is required outside mock mode")

    @property
    def state(self) -> ApplicationState:
        return self.machine.state

    @property
    def platform(self) -> PlatformActions:
        if self._platform is None:
            raise RuntimeError("No platform actions configured")
        return self._platform

    @property
    def reactor(self) -> UiReactor:
        if not self._reactor:
            raise RuntimeError("App not started. Call await app.start() first.")
        return self._reactor

    async def start(self) -> None:
        """Attach the reactor and clean up stale captures."""
        if self._started:
            return

        self.logger.info(
            "app_starting",
            api_level=self.config.platform.api_level,
            mock_mode=self.config.mock_mode,
        )

        self._reactor = UiReactor(self.machine, self.platform, self.camera_manager)
        self._reactor.attach()
        self.camera_manager.clean_old_images(self.config.camera.max_age_days)

        self._started = True
        self.logger.info("app_started")

    async def stop(self) -> None:
        """Detach the reactor."""
        if not self._started:
            return

        if self._reactor:
            self._reactor.detach()
        self._reactor = None
        self._started = False
        self.logger.info("app_stopped")

    async def __aenter__(self) -> App:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    def _require_started(self) -> None:
        if not self._started:
            raise RuntimeError("App not started. Call await app.start() first.")

    async def select_gallery_image(self) -> ApplicationState:
        """User tapped "select photo"."""
        self._require_started()
        await self.machine.request_action(PermissionCategory.GALLERY)
        return self.state

    async def take_photo(self) -> ApplicationState:
        """User tapped "take photo"."""
        self._require_started()
        await self.machine.request_action(PermissionCategory.CAMERA)
        return self.state

    async def select_file(self) -> ApplicationState:
        """User tapped "select file"."""
        self._require_started()
        await self.machine.request_action(PermissionCategory.FILE_PICKER)
        return self.state
