"""Camera capture file provisioning."""

from __future__ import annotations

import os
import tempfile
import time
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote, urlparse

from permflow.common.logging import get_logger

PICTURES_SEGMENT = "pictures"


class CameraManager:
    """Provisions files the camera writes captures into.

    References handed out are ``content://<authority>/pictures/<name>`` when an
    authority is configured, otherwise plain file URIs.
    """

    def __init__(self, pictures_dir: Path | str, authority: str | None = None) -> None:
        self.pictures_dir = Path(pictures_dir).expanduser()
        self.authority = authority
        self.logger = get_logger("camera_manager", authority=authority)

    def create_image_uri(self) -> str | None:
        """Create a unique empty capture file and return its reference.

        Returns:
            Reference for the new file, or None if it could not be created.
        """
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.pictures_dir.mkdir(parents=True, exist_ok=True)

            fd, name = tempfile.mkstemp(
                prefix=f"JPEG_{timestamp}_",
                suffix=".jpg",
                dir=self.pictures_dir,
            )
            os.close(fd)
        except OSError as e:
            self.logger.error("capture_file_failed", error=str(e))
            return None

        path = Path(name)
        self.logger.debug("capture_file_created", file=path.name)

        if self.authority:
            return f"content://{self.authority}/{PICTURES_SEGMENT}/{path.name}"
        return path.resolve().as_uri()

    def path_for(self, uri: str) -> Path | None:
        """Resolve a reference created by this manager back to a file path."""
        parsed = urlparse(uri)

        if parsed.scheme == "file":
            return Path(unquote(parsed.path))

        if parsed.scheme == "content" and parsed.netloc == self.authority:
            segments = [s for s in parsed.path.split("/") if s]
            if len(segments) == 2 and segments[0] == PICTURES_SEGMENT:
                return self.pictures_dir / unquote(segments[1])

        return None

    def clean_old_images(self, max_age_days: int = 7) -> int:
        """Delete captures older than ``max_age_days``.

        Returns:
            Number of files removed.
        """
        if not self.pictures_dir.exists():
            return 0

        cutoff = time.time() - max_age_days * 24 * 60 * 60
        removed = 0

        for path in self.pictures_dir.iterdir():
            try:
                if path.is_file() and path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except OSError as e:
                self.logger.warning("capture_cleanup_failed", file=path.name, error=str(e))

        if removed:
            self.logger.info("captures_cleaned", removed=removed)
        return removed
