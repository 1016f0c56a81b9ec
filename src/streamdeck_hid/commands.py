"""Feature report and image report header framing.

Two opcode layouts exist: the one used by the original and Mini devices,
and the "v2" layout shared by every JPEG-based device.

Legacy feature reports:
- Reset:      0b 63
- Brightness: 05 55 aa d1 01 <percent>
- Version:    report ID 0x04, string at offset 5

V2 feature reports:
- Reset:      03 02
- Brightness: 03 08 <percent>
- Version:    report ID 0x05, string at offset 6
"""

import struct

from streamdeck_hid.constants import FEATURE_REPORT_SIZE
from streamdeck_hid.exceptions import DeviceCommunicationError
from streamdeck_hid.kinds import Kind

MAX_BRIGHTNESS = 100


def _feature_report(prefix: bytes) -> bytes:
    return prefix + bytes(FEATURE_REPORT_SIZE - len(prefix))


def reset_report(kind: Kind) -> bytes:
    """Build the feature report that resets the device display."""
    if kind.capabilities.is_v2:
        return _feature_report(bytes([0x03, 0x02]))
    return _feature_report(bytes([0x0B, 0x63]))


def brightness_report(kind: Kind, percent: int) -> bytes:
    """Build the feature report that sets display brightness.

    Args:
        kind: The device model.
        percent: Brightness in percent. Values above 100 are clamped.
    """
    percent = max(0, min(percent, MAX_BRIGHTNESS))
    if kind.capabilities.is_v2:
        return _feature_report(bytes([0x03, 0x08, percent]))
    return _feature_report(bytes([0x05, 0x55, 0xAA, 0xD1, 0x01, percent]))


def version_request_id(kind: Kind) -> int:
    """Report ID used to request the firmware version."""
    return 0x05 if kind.capabilities.is_v2 else 0x04


def parse_version(kind: Kind, response: bytes) -> str:
    """Extract the firmware version string from a feature report response.

    Raises:
        DeviceCommunicationError: If the version is not valid UTF-8.
    """
    offset = 6 if kind.capabilities.is_v2 else 5
    try:
        return bytes(response[offset:]).decode("utf-8").rstrip("\x00")
    except UnicodeDecodeError as e:
        msg = f"Malformed firmware version: {bytes(response).hex()}"
        raise DeviceCommunicationError(msg) from e


def write_image_header(
    kind: Kind,
    buf: bytearray,
    key: int,
    sequence: int,
    is_last: bool,
    payload_len: int,
) -> None:
    """Write an image report header at the start of ``buf``.

    V2 layout:     02 07 <key> <last> <len:le16> <seq:le16>
    Legacy layout: 02 01 <seq:le16> <last> <key>

    The legacy layout carries no payload length.
    """
    if kind.capabilities.is_v2:
        struct.pack_into("<BBBBHH", buf, 0, 0x02, 0x07, key, int(is_last), payload_len, sequence)
    else:
        struct.pack_into("<BBHBB", buf, 0, 0x02, 0x01, sequence, int(is_last), key)
