"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from streamdeck_hid.kinds import Kind


@pytest.fixture
def mock_hid_device() -> MagicMock:
    """Create a mock hid.device object."""
    device = MagicMock()
    device.open = MagicMock()
    device.close = MagicMock()
    device.read = MagicMock(return_value=[])
    device.write = MagicMock(side_effect=lambda data: len(data))
    device.send_feature_report = MagicMock(side_effect=lambda data: len(data))
    device.get_feature_report = MagicMock(return_value=[0] * 17)
    device.set_nonblocking = MagicMock(return_value=0)
    device.get_manufacturer_string = MagicMock(return_value="Elgato")
    device.get_product_string = MagicMock(return_value="Stream Deck")
    device.get_serial_number_string = MagicMock(return_value="AL12345678")
    return device


@pytest.fixture
def patched_hid(mock_hid_device: MagicMock) -> Iterator[MagicMock]:
    """Patch hid.device in the device module to return the mock."""
    with patch("streamdeck_hid.device.hid.device", return_value=mock_hid_device):
        yield mock_hid_device


@pytest.fixture(params=list(Kind), ids=lambda kind: kind.name)
def any_kind(request: pytest.FixtureRequest) -> Kind:
    """Parametrise a test over every device model."""
    kind: Kind = request.param
    return kind
