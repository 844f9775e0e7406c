"""permflow - runtime permission flow for camera, gallery and file picker."""

__version__ = "0.1.0"
__author__ = "permflow Team"

from permflow.config import Config, load_config

__all__ = ["Config", "load_config", "__version__"]
