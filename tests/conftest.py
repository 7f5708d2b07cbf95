"""Global pytest fixtures and configuration."""

import io
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sensornode.config import NodeSettings  # noqa: E402
from sensornode.models.credentials import Credentials  # noqa: E402
from sensornode.models.upload import UploadResult  # noqa: E402
from sensornode.services.console import InteractiveInput  # noqa: E402
from sensornode.services.credential_store import CredentialStore  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    """Settings with zero waits and storage under tmp_path."""
    return NodeSettings(
        connect_interval=0,
        tick_interval=0,
        storage_dir=str(tmp_path / "data"),
        log_file=str(tmp_path / "logs" / "sensornode.log"),
    )


@pytest.fixture
def credential_store(tmp_path):
    """CredentialStore backed by a temporary namespace file."""
    return CredentialStore(storage_dir=str(tmp_path / "data"), namespace="test")


@pytest.fixture
def sample_credentials():
    """A complete credential triple."""
    return Credentials(
        network_name="greenhouse",
        network_secret="s3cret-pass",
        upload_key="WRITEKEY123",
    )


@pytest.fixture
def mock_network():
    """Mock NetworkConnector that connects on the first try."""
    network = MagicMock()
    network.connect = AsyncMock(return_value=True)
    network.is_connected = AsyncMock(return_value=True)
    network.recover = AsyncMock(return_value=True)
    return network


@pytest.fixture
def mock_uplink():
    """Mock UplinkClient that accepts every request."""
    uplink = MagicMock()
    uplink.report = AsyncMock(return_value=UploadResult(status_code=200))
    uplink.validate = AsyncMock(return_value=UploadResult(status_code=200))
    return uplink


def make_console(lines, secrets=()):
    """InteractiveInput fed from scripted operator answers."""
    return InteractiveInput(
        read_line=MagicMock(side_effect=list(lines)),
        read_secret=MagicMock(side_effect=list(secrets)),
        output=io.StringIO(),
    )


@pytest.fixture
def console_factory():
    """Factory for scripted consoles: console_factory(lines, secrets)."""
    return make_console
