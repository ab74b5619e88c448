"""CLI fixtures: keep structlog off the CliRunner streams."""

from unittest.mock import MagicMock, patch

import pytest
from structlog.testing import capture_logs


@pytest.fixture(autouse=True)
def configure_logging_mock():
    """The root callback must not bind structlog to CliRunner's stderr."""
    with patch("buildpack_packager.cli.app.configure_logging") as mock:
        yield mock


@pytest.fixture(autouse=True)
def captured_logs(configure_logging_mock: MagicMock):
    """Log events emitted while a command runs, as dicts."""
    with capture_logs() as logs:
        yield logs
