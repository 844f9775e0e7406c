"""Tests for logging setup."""

import structlog

from permflow.common.logging import get_logger, render_enums, setup_logging
from permflow.domain import PermissionCategory, PermissionStatus


class TestRenderEnums:
    """Tests for the enum rendering processor."""

    def test_enums_logged_by_value(self):
        """Categories and statuses are replaced by their values."""
        event_dict = {
            "event": "permission_checked",
            "category": PermissionCategory.FILE_PICKER,
            "status": PermissionStatus.NOT_REQUIRED,
            "attempt": 2,
        }

        result = render_enums(None, "info", event_dict)

        assert result == {
            "event": "permission_checked",
            "category": "file_picker",
            "status": "not_required",
            "attempt": 2,
        }


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_session_bound(self):
        """The session name is bound to every entry."""
        structlog.contextvars.clear_contextvars()

        setup_logging(level="DEBUG", session="permflow-test")

        assert structlog.contextvars.get_contextvars() == {"session": "permflow-test"}
        structlog.contextvars.clear_contextvars()

    def test_get_logger_binds_initial_values(self):
        """Initial values end up in the logger context."""
        setup_logging(level="INFO", json_output=True)

        logger = get_logger("permflow", source="tests")

        assert structlog.get_context(logger) == {"source": "tests"}
