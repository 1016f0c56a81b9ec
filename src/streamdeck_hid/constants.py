"""Constants for Stream Deck HID communication."""

from typing import Final

# Elgato USB Vendor ID
VENDOR_ID: Final[int] = 0x0FD9

# Product IDs
PID_ORIGINAL: Final[int] = 0x0060
PID_ORIGINAL_V2: Final[int] = 0x006D
PID_MINI: Final[int] = 0x0063
PID_XL: Final[int] = 0x006C
PID_MK2: Final[int] = 0x0080
PID_PLUS: Final[int] = 0x0084

SUPPORTED_PIDS: Final[tuple[int, ...]] = (
    PID_ORIGINAL,
    PID_ORIGINAL_V2,
    PID_MINI,
    PID_XL,
    PID_MK2,
    PID_PLUS,
)

# Feature reports (reset, brightness, version) are fixed size
FEATURE_REPORT_SIZE: Final[int] = 17

# Largest input report any supported device produces
INPUT_REPORT_SIZE: Final[int] = 36

# The original Stream Deck splits every 72x72 BMP into two fixed packets
ORIGINAL_FIRST_CHUNK: Final[int] = 7749
ORIGINAL_IMAGE_BYTES: Final[int] = 72 * 72 * 3  # 15552 bytes

# Quality used when re-encoding key images for JPEG devices
JPEG_QUALITY: Final[int] = 100
