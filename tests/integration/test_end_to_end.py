"""End-to-end permission flows through the App session."""

import pytest

from permflow.app import App
from permflow.config import Config
from permflow.data import CameraManager, MockPermissionRepository, PlatformPermissionRepository
from permflow.domain import PermissionCategory, PermissionStatus
from permflow.presentation import (
    Granted,
    Idle,
    MockPlatformActions,
    PermanentlyDenied,
    ShowRationale,
)
from permflow.presentation.platform import DEFAULT_PICKS

GALLERY = PermissionCategory.GALLERY
CAMERA = PermissionCategory.CAMERA
FILE_PICKER = PermissionCategory.FILE_PICKER


@pytest.mark.integration
class TestPermissionFlows:
    """Flows driven by the UI reactor and the mock platform."""

    @pytest.mark.asyncio
    async def test_gallery_already_granted(self, app: App, repository, platform):
        """A granted gallery opens the picker without a prompt."""
        repository.set_status(GALLERY, PermissionStatus.GRANTED)

        state = await app.select_gallery_image()

        assert state.permission(GALLERY) == Granted()
        assert state.selected_image == DEFAULT_PICKS[GALLERY]
        assert platform.calls == [("picker", GALLERY)]

    @pytest.mark.asyncio
    async def test_camera_granted_at_prompt(self, app: App, platform, camera_manager):
        """Granting at the prompt captures a JPEG into the pictures directory."""
        platform.queue_prompt(CAMERA, granted=True)

        state = await app.take_photo()

        assert state.permission(CAMERA) == Granted()
        assert state.camera_image is not None
        assert state.current_image() == state.camera_image
        assert platform.calls[0] == ("permission_dialog", CAMERA)

        capture = camera_manager.path_for(state.camera_image)
        assert capture.read_bytes().startswith(b"\xff\xd8")

    @pytest.mark.asyncio
    async def test_rationale_then_confirm(self, app: App, platform):
        """Confirming the rationale prompts again and then captures."""
        platform.queue_prompt(CAMERA, granted=False, should_show_rationale=True)

        state = await app.take_photo()
        assert isinstance(state.permission(CAMERA), ShowRationale)
        assert state.camera_image is None

        # Second prompt falls back to the default answer (granted)
        await app.machine.dialog_confirmed(CAMERA)

        assert app.state.permission(CAMERA) == Granted()
        assert app.state.camera_image is not None
        dialogs = [call for call in platform.calls if call[0] == "permission_dialog"]
        assert len(dialogs) == 2

    @pytest.mark.asyncio
    async def test_rationale_then_dismiss(self, app: App, platform):
        """Dismissing the rationale returns the camera to Idle."""
        platform.queue_prompt(CAMERA, granted=False, should_show_rationale=True)
        await app.take_photo()

        await app.machine.dialog_dismissed(CAMERA)

        assert app.state.permission(CAMERA) == Idle()

    @pytest.mark.asyncio
    async def test_permanently_denied_settings_and_recheck(
        self, app: App, repository, platform
    ):
        """Permanent denial, settings, then a successful recheck."""
        platform.queue_prompt(GALLERY, granted=False, should_show_rationale=False)

        state = await app.select_gallery_image()
        assert isinstance(state.permission(GALLERY), PermanentlyDenied)

        await app.machine.dialog_confirmed(GALLERY)
        assert ("settings", GALLERY) in platform.calls
        assert app.state.settings_request is None

        # The user enabled the permission in settings
        repository.set_status(GALLERY, PermissionStatus.GRANTED)
        await app.machine.recheck_permission(GALLERY)

        assert app.state.permission(GALLERY) == Granted()
        assert app.state.selected_image == DEFAULT_PICKS[GALLERY]

    @pytest.mark.asyncio
    async def test_file_picker_needs_no_prompt(self, app: App, platform):
        """The file picker opens without any prompt."""
        state = await app.select_file()

        assert state.permission(FILE_PICKER) == Granted()
        assert state.selected_file == DEFAULT_PICKS[FILE_PICKER]
        assert platform.calls == [("picker", FILE_PICKER)]

    @pytest.mark.asyncio
    async def test_picker_cancelled(self, app: App, repository, platform):
        """A cancelled pick leaves no selection."""
        repository.set_status(GALLERY, PermissionStatus.GRANTED)
        platform.set_pick(GALLERY, None)

        state = await app.select_gallery_image()

        assert state.permission(GALLERY) == Granted()
        assert state.selected_image is None
        assert not state.has_selected_image()

    @pytest.mark.asyncio
    async def test_capture_cancelled(self, app: App, repository, platform):
        """A cancelled capture leaves no camera image."""
        repository.set_status(CAMERA, PermissionStatus.GRANTED)
        platform.capture_succeeds = False

        state = await app.take_photo()

        assert state.permission(CAMERA) == Granted()
        assert state.camera_image is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category", [GALLERY, CAMERA, FILE_PICKER])
    async def test_loading_while_operation_runs(self, app: App, repository, category):
        """The session is loading only while the picker or camera is open."""
        repository.set_status(category, PermissionStatus.GRANTED)
        loading = []
        app.machine.add_listener(lambda s: loading.append(s.is_loading))

        await app.machine.request_action(category)

        assert loading.count(True) == 1
        assert loading.index(True) < len(loading) - 1
        assert not app.state.is_loading
        assert app.state.permission(category) == Granted()

    @pytest.mark.asyncio
    async def test_loading_cleared_when_operation_fails(self, app: App, repository, platform):
        """A crashing picker still clears the loading flag."""
        async def broken_picker(category):
            assert app.state.is_loading
            raise RuntimeError("picker crashed")

        platform.launch_picker = broken_picker
        repository.set_status(GALLERY, PermissionStatus.GRANTED)

        state = await app.select_gallery_image()

        assert not state.is_loading
        assert state.error_message == "picker crashed"

    @pytest.mark.asyncio
    async def test_reactor_failure_surfaces_error(self, app: App, repository, platform):
        """A failing platform action becomes the session error."""
        async def broken_picker(category):
            raise RuntimeError("picker crashed")

        platform.launch_picker = broken_picker
        repository.set_status(GALLERY, PermissionStatus.GRANTED)

        state = await app.select_gallery_image()

        assert state.error_message == "picker crashed"
        await app.machine.clear_error()
        assert app.state.error_message is None


@pytest.mark.integration
class TestAppSession:
    """Tests for App construction and lifecycle."""

    @pytest.mark.asyncio
    async def test_photo_picker_gallery(self, config: Config):
        """With the photo picker the gallery needs no prompt."""
        config.platform.photo_picker_enabled = True

        async with App(config=config) as app:
            state = await app.select_gallery_image()

        assert isinstance(app.repository, MockPermissionRepository)
        assert state.permission(GALLERY) == Granted()
        assert state.selected_image == DEFAULT_PICKS[GALLERY]

    @pytest.mark.asyncio
    async def test_capture_file_failure(self, config: Config, repository, tmp_path):
        """Failing to create the capture file reports an error and resets."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        camera_manager = CameraManager(blocker / "Pictures")
        repository.set_status(CAMERA, PermissionStatus.GRANTED)

        async with App(
            config=config,
            repository=repository,
            platform=MockPlatformActions(camera_manager),
            camera_manager=camera_manager,
        ) as app:
            state = await app.take_photo()

        assert state.permission(CAMERA) == Idle()
        assert state.error_message

    @pytest.mark.asyncio
    async def test_checker_repository(self, config: Config, platform):
        """A checker builds the platform-backed repository."""
        config.mock_mode = False
        config.platform.api_level = 30

        async with App(config=config, checker=lambda p: True, platform=platform) as app:
            assert isinstance(app.repository, PlatformPermissionRepository)
            assert app.machine.get_concrete_permission_identifiers(GALLERY) == [
                "android.permission.READ_EXTERNAL_STORAGE"
            ]
            state = await app.take_photo()

        assert state.camera_image is not None

    def test_requires_checker_outside_mock_mode(self, config: Config):
        """Outside mock mode a checker or repository is required."""
        config.mock_mode = False

        with pytest.raises(ValueError):
            App(config=config)

    @pytest.mark.asyncio
    async def test_actions_require_start(self, config: Config):
        """Actions fail before the session is started."""
        app = App(config=config)

        with pytest.raises(RuntimeError):
            await app.take_photo()

    @pytest.mark.asyncio
    async def test_stop_detaches_reactor(self, config: Config, repository, platform):
        """A stopped session no longer runs platform actions."""
        repository.set_status(GALLERY, PermissionStatus.GRANTED)
        app = App(config=config, repository=repository, platform=platform)
        await app.start()
        await app.stop()

        await app.machine.request_action(GALLERY)

        assert platform.calls == []
        assert app.state.selected_image is None
