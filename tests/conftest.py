"""Pytest configuration and fixtures for permflow tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from permflow.config import Config


def pytest_configure(config: pytest.Config) -> None:
    """Configure test markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def pictures_dir(tmp_path: Path) -> Path:
    """Directory for camera captures."""
    return tmp_path / "Pictures"


@pytest.fixture
def config(pictures_dir: Path) -> Config:
    """Get test configuration."""
    cfg = Config()
    cfg.mock_mode = True
    cfg.app.mode = "development"
    cfg.app.log_level = "DEBUG"
    cfg.camera.pictures_dir = str(pictures_dir)
    return cfg


# Collaborator fixtures


@pytest.fixture
def repository(config: Config):
    """Mock permission repository on the configured platform."""
    from permflow.data import MockPermissionRepository

    return MockPermissionRepository(api_level=config.platform.api_level)


@pytest.fixture
def camera_manager(config: Config):
    """Camera manager writing into the test pictures directory."""
    from permflow.data import CameraManager

    return CameraManager(config.camera.pictures_dir, config.camera.authority)


@pytest.fixture
def platform(camera_manager):
    """Scripted platform actions."""
    from permflow.presentation import MockPlatformActions

    return MockPlatformActions(camera_manager)


@pytest.fixture
def machine(repository, config: Config):
    """State machine without a reactor attached."""
    from permflow.presentation import PermissionStateMachine

    return PermissionStateMachine(repository, messages=config.messages)


@pytest.fixture
async def app(config: Config, repository, platform, camera_manager):
    """Started App session with mock collaborators."""
    from permflow.app import App

    session = App(
        config=config,
        repository=repository,
        platform=platform,
        camera_manager=camera_manager,
    )
    await session.start()
    yield session
    await session.stop()
