"""Device connection and the high-level Stream Deck API."""

import logging
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

import hid
from PIL import Image, ImageFont

from streamdeck_hid import commands, images
from streamdeck_hid.constants import FEATURE_REPORT_SIZE, VENDOR_ID
from streamdeck_hid.exceptions import DeviceCommunicationError, ReadTimeoutError
from streamdeck_hid.inputs import Input, decode_buttons, decode_input
from streamdeck_hid.kinds import Capabilities, Kind, device_name, kind_for_pid
from streamdeck_hid.reports import write_image

if TYPE_CHECKING:
    from collections.abc import Generator

    from streamdeck_hid.images import (
        Colour,
        DeviceImage,
        ImageOptions,
        TextOptions,
        TextPosition,
    )

logger = logging.getLogger(__name__)


class StreamDeck:
    """Context manager for Stream Deck communication.

    The device handle is owned exclusively by this object. Every method
    performs at most a handful of blocking HID calls and surfaces the
    first failure; nothing is retried.

    Example:
        with StreamDeck(0x0063) as deck:
            deck.set_brightness(50)
            deck.set_button_rgb(0, Colour(255, 0, 0))
    """

    def __init__(self, pid: int, vid: int = VENDOR_ID, serial: str | None = None) -> None:
        """Initialize the device wrapper.

        Args:
            pid: USB product ID, which selects the device model.
            vid: USB vendor ID.
            serial: Serial number, to pick one of several identical devices.

        Raises:
            UnrecognisedPIDError: If the product ID is not supported.
        """
        self._kind = kind_for_pid(pid)
        self._vid = vid
        self._pid = pid
        self._serial = serial
        self._device: hid.device | None = None

    def __enter__(self) -> Self:
        """Open connection to the device."""
        logger.debug("Device info: %s (%s)", self._kind.name, device_name(self._kind))
        device = hid.device()
        try:
            device.open(self._vid, self._pid, self._serial)
        except OSError as e:
            msg = f"Failed to open device {self._vid:04x}:{self._pid:04x}: {e}"
            raise DeviceCommunicationError(msg) from e
        self._device = device
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close connection to the device."""
        self.close()

    def close(self) -> None:
        """Release the HID handle."""
        if self._device is not None:
            try:
                self._device.close()
            finally:
                self._device = None

    @property
    def kind(self) -> Kind:
        """The connected device model."""
        return self._kind

    @property
    def capabilities(self) -> Capabilities:
        """Protocol constants of the connected device model."""
        return self._kind.capabilities

    @property
    def image_size(self) -> tuple[int, int]:
        """Key image size in pixels as ``(width, height)``."""
        return self._kind.capabilities.image_size

    # -- Descriptors ---------------------------------------------------

    @property
    def manufacturer(self) -> str:
        """The USB manufacturer string."""
        return self._call("get_manufacturer_string") or ""

    @property
    def product(self) -> str:
        """The USB product string."""
        return self._call("get_product_string") or ""

    @property
    def serial(self) -> str:
        """The USB serial number string."""
        return self._call("get_serial_number_string") or ""

    # -- Control commands ----------------------------------------------

    def version(self) -> str:
        """Fetch the firmware version string."""
        report_id = commands.version_request_id(self._kind)
        response = self._call("get_feature_report", report_id, FEATURE_REPORT_SIZE)
        return commands.parse_version(self._kind, bytes(response))

    def reset(self) -> None:
        """Reset the device, clearing all key images."""
        self._send_feature_report(commands.reset_report(self._kind))

    def set_brightness(self, percent: int) -> None:
        """Set display brightness in percent (clamped to 0-100)."""
        self._send_feature_report(commands.brightness_report(self._kind, percent))

    def set_blocking(self, blocking: bool) -> None:
        """Switch between blocking and non-blocking reads.

        In non-blocking mode reads return immediately and raise
        ``NoDataError`` when nothing is pending.
        """
        result = self._call("set_nonblocking", not blocking)
        if result is not None and result < 0:
            msg = f"Failed to set blocking mode (result={result})"
            raise DeviceCommunicationError(msg)

    # -- Input ---------------------------------------------------------

    def read_input(self, timeout: float | None = None) -> Input:
        """Read and decode one input report.

        Args:
            timeout: Seconds to wait, or None to wait according to the
                blocking mode.

        Raises:
            ReadTimeoutError: If the timeout elapsed without data.
            NoDataError: If the device reported nothing new.
        """
        return decode_input(self._kind, self._read(timeout))

    def read_buttons(self, timeout: float | None = None) -> tuple[int, ...]:
        """Read one input report and return the key states.

        Raises:
            ReadTimeoutError: If the timeout elapsed without data.
            NoDataError: If the device reported nothing new.
        """
        return decode_buttons(self._kind, self._read(timeout))

    # -- Images --------------------------------------------------------

    def convert_image(self, data: bytes, options: "ImageOptions | None" = None) -> "DeviceImage":
        """Convert a key-sized RGB8 buffer into the device representation.

        The buffer is rotated, mirrored and reordered to the device's
        colour layout before encoding.

        Raises:
            InvalidImageSizeError: If the buffer does not match the key size.
        """
        return images.convert(self._kind, data, options)

    def encode_image(self, native: bytes) -> "DeviceImage":
        """Encode a buffer that is already oriented and in device colour order."""
        return images.encode(self._kind, native)

    def load_image(self, path: Path | str, options: "ImageOptions | None" = None) -> "DeviceImage":
        """Load an image file into the device representation."""
        return images.load_image(self._kind, path, options)

    def set_button_rgb(self, key: int, colour: "Colour") -> None:
        """Fill a key with a solid colour."""
        self.write_button_image(key, images.solid_colour(self._kind, colour))

    def set_button_image(
        self, key: int, image: Image.Image, options: "ImageOptions | None" = None
    ) -> None:
        """Show a decoded image on a key.

        Images of any size are accepted. They are scaled to fit the key,
        keeping their aspect ratio, and centred on the background colour
        from ``options`` (black by default). Use ``convert_image`` for a
        strict size check.
        """
        native = images.prepare_image(self._kind, image, options)
        self.write_button_image(key, self.encode_image(native))

    def set_button_text(
        self,
        key: int,
        text: str,
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None,
        position: "TextPosition | None" = None,
        options: "TextOptions | None" = None,
    ) -> None:
        """Render text onto a key, breaking lines on ``\\n``."""
        image = images.render_text(self._kind, text, font, position, options)
        self.set_button_image(key, image)

    def set_button_file(
        self, key: int, path: Path | str, options: "ImageOptions | None" = None
    ) -> None:
        """Show an image file on a key."""
        self.write_button_image(key, self.load_image(path, options))

    def write_button_image(self, key: int, image: "DeviceImage") -> None:
        """Upload an already converted image to a key.

        Raises:
            InvalidKeyIndexError: If the key is out of range.
            DeviceCommunicationError: If any report write fails.
        """
        write_image(self._write, self._kind, key, image)

    # -- Transport -----------------------------------------------------

    def _require_device(self) -> hid.device:
        if self._device is None:
            msg = "Device not opened"
            raise DeviceCommunicationError(msg)
        return self._device

    def _call(self, name: str, *args: object) -> Any:
        """Invoke a hidapi method, wrapping transport errors."""
        device = self._require_device()
        try:
            return getattr(device, name)(*args)
        except (OSError, ValueError) as e:
            msg = f"HID {name} failed: {e}"
            raise DeviceCommunicationError(msg) from e

    def _read(self, timeout: float | None) -> bytes:
        length = self._kind.capabilities.input_report_len
        if timeout is None:
            data = self._call("read", length)
        else:
            # hidapi treats 0 as "no timeout", so wait at least 1ms
            millis = max(1, int(timeout * 1000))
            data = self._call("read", length, millis)
            if not data:
                raise ReadTimeoutError
        return bytes(data)

    def _write(self, data: bytes) -> None:
        result = self._call("write", data)
        if result < 0:
            msg = f"Output report rejected by device (result={result})"
            raise DeviceCommunicationError(msg)

    def _send_feature_report(self, data: bytes) -> None:
        result = self._call("send_feature_report", data)
        if result < 0:
            msg = f"Feature report rejected by device (result={result})"
            raise DeviceCommunicationError(msg)


@contextmanager
def connect(
    pid: int, vid: int = VENDOR_ID, serial: str | None = None
) -> "Generator[StreamDeck]":
    """Context manager for opening a Stream Deck.

    Args:
        pid: USB product ID.
        vid: USB vendor ID.
        serial: Optional serial number.

    Yields:
        An opened StreamDeck instance.

    Example:
        with connect(0x006D) as deck:
            print(deck.version())
    """
    deck = StreamDeck(pid, vid=vid, serial=serial)
    with deck:
        yield deck
