"""Configuration management for permflow."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseModel):
    """Application configuration."""

    name: str = "permflow"
    mode: Literal["production", "development"] = "development"
    log_level: str = "INFO"


class PlatformConfig(BaseModel):
    """Target platform configuration."""

    # Android API level; 33 is TIRAMISU
    api_level: int = 34
    photo_picker_enabled: bool = False


class MessagesConfig(BaseModel):
    """User-facing permission messages."""

    gallery_rationale: str = (
        "Precisamos de acesso à galeria para selecionar imagens. "
        "Por favor, permita o acesso nas configurações de permissão."
    )
    camera_rationale: str = (
        "Precisamos de acesso à câmera para tirar fotos. "
        "Por favor, permita o acesso nas configurações de permissão."
    )
    file_picker_rationale: str = ""
    gallery_settings: str = "Precisamos de acesso à galeria para selecionar imagens."
    camera_settings: str = "Precisamos de acesso à câmera para tirar fotos."
    file_picker_settings: str = ""
    status_error: str = "Não foi possível verificar a permissão."


class CameraConfig(BaseModel):
    """Camera capture storage configuration."""

    pictures_dir: str = "~/.local/share/permflow/Pictures"
    authority: str | None = "com.estudos.permflow.fileprovider"
    max_age_days: int = 7


class Config(BaseSettings):
    """Main configuration for permflow."""

    model_config = SettingsConfigDict(
        env_prefix="PERMFLOW_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app: AppConfig = Field(default_factory=AppConfig)
    platform: PlatformConfig = Field(default_factory=PlatformConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)

    # Mock collaborators for development
    mock_mode: bool = False

    @classmethod
    def from_yaml(cls, path: Path | str) -> Config:
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, allow_unicode=True)


def load_config(
    config_path: Path | str | None = None,
    env_override: bool = True,
) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Path to config file. If None, searches standard locations.
        env_override: Whether to allow environment variables to override config.

    Returns:
        Loaded configuration.
    """
    search_paths = [
        Path("/etc/permflow/config.yaml"),
        Path.home() / ".config" / "permflow" / "config.yaml",
        Path("config.yaml"),
        Path("configs/permflow.yaml"),
    ]

    if config_path:
        search_paths.insert(0, Path(config_path))

    config_file: Path | None = None
    for path in search_paths:
        if path.exists():
            config_file = path
            break

    if config_file:
        config = Config.from_yaml(config_file)
    else:
        config = Config()

    if env_override:
        api_level = os.environ.get("PERMFLOW_API_LEVEL")
        if api_level:
            config.platform.api_level = int(api_level)

        if os.environ.get("PERMFLOW_MOCK_MODE", "").lower() in ("1", "true", "yes"):
            config.mock_mode = True

    return config


def get_default_config() -> dict[str, Any]:
    """Get default configuration as dictionary."""
    return Config().model_dump()
