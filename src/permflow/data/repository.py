"""Permission repositories: status source and requirement resolver."""

from __future__ import annotations

from typing import Callable

from permflow.common.logging import get_logger
from permflow.domain.models import PermissionCategory, PermissionStatus

CAMERA = "android.permission.CAMERA"
READ_MEDIA_IMAGES = "android.permission.READ_MEDIA_IMAGES"
READ_EXTERNAL_STORAGE = "android.permission.READ_EXTERNAL_STORAGE"

# Statuses a status check can report for a category that needs a grant
CHECKABLE_STATUSES = (PermissionStatus.GRANTED, PermissionStatus.DENIED)

# First API level with granular media permissions and the system photo picker
TIRAMISU = 33

PermissionChecker = Callable[[str], bool]


def resolve_permissions(
    category: PermissionCategory,
    api_level: int,
    photo_picker_enabled: bool = False,
) -> list[str]:
    """Map a category to the platform permissions it needs.

    Args:
        category: Permission category.
        api_level: Platform API level.
        photo_picker_enabled: Gallery uses the system photo picker when available.

    Returns:
        Ordered permission identifiers; empty when no grant is needed.
    """
    if category is PermissionCategory.CAMERA:
        return [CAMERA]

    if category is PermissionCategory.GALLERY:
        if api_level >= TIRAMISU:
            if photo_picker_enabled:
                return []
            return [READ_MEDIA_IMAGES]
        return [READ_EXTERNAL_STORAGE]

    return []


class PermissionRepository:
    """Abstract permission repository."""

    async def check_status(self, category: PermissionCategory) -> PermissionStatus:
        """Query the current status of a category."""
        raise NotImplementedError

    def get_required_permissions(self, category: PermissionCategory) -> list[str]:
        """Get the platform permissions required for a category."""
        raise NotImplementedError

    def is_permanently_denied(self, category: PermissionCategory) -> bool:
        """Whether the user blocked further prompts for a category.

        Answering this needs the rationale signal of a live prompt, which a
        repository never sees, so the result is always False. Permanent denial
        is only detected from the prompt result.
        """
        return False


class PlatformPermissionRepository(PermissionRepository):
    """Repository backed by a platform permission checker."""

    def __init__(
        self,
        checker: PermissionChecker,
        api_level: int,
        photo_picker_enabled: bool = False,
    ) -> None:
        """Initialize the repository.

        Args:
            checker: Returns True when a permission identifier is granted.
            api_level: Platform API level used for resolution.
            photo_picker_enabled: Whether gallery access goes through the photo picker.
        """
        self._checker = checker
        self.api_level = api_level
        self.photo_picker_enabled = photo_picker_enabled
        self.logger = get_logger("permission_repository", api_level=api_level)

    def get_required_permissions(self, category: PermissionCategory) -> list[str]:
        return resolve_permissions(category, self.api_level, self.photo_picker_enabled)

    async def check_status(self, category: PermissionCategory) -> PermissionStatus:
        permissions = self.get_required_permissions(category)

        if not permissions:
            return PermissionStatus.NOT_REQUIRED

        if all(self._checker(permission) for permission in permissions):
            return PermissionStatus.GRANTED

        return PermissionStatus.DENIED


class MockPermissionRepository(PermissionRepository):
    """Mock repository for testing and demos."""

    def __init__(
        self,
        statuses: dict[PermissionCategory, PermissionStatus] | None = None,
        api_level: int = 34,
        photo_picker_enabled: bool = False,
    ) -> None:
        self._statuses: dict[PermissionCategory, PermissionStatus] = {}
        self._failure: Exception | None = None
        self.api_level = api_level
        self.photo_picker_enabled = photo_picker_enabled
        self.checks: list[PermissionCategory] = []

        for category, status in (statuses or {}).items():
            self.set_status(category, status)

    def set_status(self, category: PermissionCategory, status: PermissionStatus) -> None:
        """Set the status reported for a category.

        Only GRANTED and DENIED can be scripted: NOT_REQUIRED follows from the
        resolver and a status check never reports a permanent denial.
        """
        if status not in CHECKABLE_STATUSES:
            raise ValueError(f"A status check cannot report {status.value}")
        self._statuses[category] = status

    def fail_with(self, error: Exception | None) -> None:
        """Make status checks raise ``error`` (None to stop failing)."""
        self._failure = error

    def get_required_permissions(self, category: PermissionCategory) -> list[str]:
        return resolve_permissions(category, self.api_level, self.photo_picker_enabled)

    async def check_status(self, category: PermissionCategory) -> PermissionStatus:
        self.checks.append(category)

        if self._failure is not None:
            raise self._failure

        if not self.get_required_permissions(category):
            return PermissionStatus.NOT_REQUIRED

        return self._statuses.get(category, PermissionStatus.DENIED)
