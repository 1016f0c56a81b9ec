"""Custom exceptions for Stream Deck HID."""


class StreamDeckError(Exception):
    """Base exception for Stream Deck errors."""


class DeviceCommunicationError(StreamDeckError):
    """Raised when communication with the device fails."""


class ReadTimeoutError(DeviceCommunicationError):
    """Raised when a timed read returns without any data."""

    def __init__(self, message: str = "Timed out waiting for input report") -> None:
        super().__init__(message)


class DeviceIOError(StreamDeckError):
    """Raised when an underlying file or OS operation fails."""


class ImageError(StreamDeckError):
    """Raised when image decoding or encoding fails."""


class InvalidImageSizeError(StreamDeckError):
    """Raised when a pixel buffer does not match the device image size."""


class InvalidKeyIndexError(StreamDeckError):
    """Raised when a key index is outside the device key range."""


class UnrecognisedPIDError(StreamDeckError):
    """Raised when a USB product ID does not map to a supported device."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        super().__init__(f"Unrecognised product ID: 0x{pid:04X}")


class NoDataError(StreamDeckError):
    """Raised when an input report signals that nothing new happened.

    In non-blocking mode this is the normal result of polling an idle
    device; callers usually treat it as "try again later".
    """

    def __init__(self, message: str = "No data") -> None:
        super().__init__(message)
