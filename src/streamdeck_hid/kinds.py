"""Device variants and their protocol capabilities.

Every Stream Deck model is described by one immutable ``Capabilities``
record. Algorithms elsewhere in the package look constants up here
instead of branching on the model, so supporting a new model only means
adding a ``Kind`` member and a table entry.
"""

import struct
from dataclasses import dataclass
from enum import Enum

from streamdeck_hid.constants import (
    PID_MINI,
    PID_MK2,
    PID_ORIGINAL,
    PID_ORIGINAL_V2,
    PID_PLUS,
    PID_XL,
)
from streamdeck_hid.exceptions import UnrecognisedPIDError


class Kind(Enum):
    """Supported Stream Deck models."""

    ORIGINAL = "original"
    ORIGINAL_V2 = "original_v2"
    MINI = "mini"
    XL = "xl"
    MK2 = "mk2"
    PLUS = "plus"

    @property
    def capabilities(self) -> "Capabilities":
        """Return the protocol constants for this model."""
        return capabilities(self)


class ImageMode(Enum):
    """Wire encoding of key images."""

    BMP = "bmp"
    JPEG = "jpeg"


class ColourOrder(Enum):
    """Channel order of pixel triplets on the wire."""

    RGB = "rgb"
    BGR = "bgr"


class Rotation(Enum):
    """Clockwise rotation applied to key images before upload."""

    ROT_0 = 0
    ROT_90 = 90
    ROT_180 = 180
    ROT_270 = 270


class Mirror(Enum):
    """Mirroring applied to key images after rotation."""

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class KeyDirection(Enum):
    """How logical key indices map onto the device's native indices."""

    LEFT_TO_RIGHT = "left_to_right"
    RIGHT_TO_LEFT = "right_to_left"


def bmp_header(width: int, height: int) -> bytes:
    """Build the 54-byte header of an uncompressed 24-bit BMP.

    Legacy devices expect this header in front of the raw pixel data of
    every key image.
    """
    pixel_bytes = width * height * 3
    file_header = struct.pack("<2sIHHI", b"BM", 54 + pixel_bytes, 0, 0, 54)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        40,  # header size
        width,
        height,
        1,  # planes
        24,  # bits per pixel
        0,  # no compression
        pixel_bytes,
        3780,  # ~96 DPI, in pixels per metre
        3780,
        0,
        0,
    )
    return file_header + info_header


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Protocol constants for a single device model."""

    keys: int
    columns: int
    image_size: tuple[int, int]
    image_mode: ImageMode
    colour_order: ColourOrder
    rotation: Rotation
    mirror: Mirror
    key_direction: KeyDirection
    key_data_offset: int
    image_report_len: int
    image_report_header_len: int
    image_base: bytes
    is_v2: bool

    @property
    def rows(self) -> int:
        """Number of key rows."""
        return self.keys // self.columns

    @property
    def image_size_bytes(self) -> int:
        """Size of an uncompressed RGB key image."""
        width, height = self.image_size
        return width * height * 3

    @property
    def input_report_len(self) -> int:
        """Number of bytes requested per input report read."""
        return self.keys + self.key_data_offset + 1


def _v2(keys: int, columns: int, size: int, rotation: Rotation) -> Capabilities:
    """Build the record shared by all JPEG-based (v2 protocol) models."""
    return Capabilities(
        keys=keys,
        columns=columns,
        image_size=(size, size),
        image_mode=ImageMode.JPEG,
        colour_order=ColourOrder.RGB,
        rotation=rotation,
        mirror=Mirror.NONE,
        key_direction=KeyDirection.LEFT_TO_RIGHT,
        key_data_offset=3,
        image_report_len=1024,
        image_report_header_len=8,
        image_base=b"",
        is_v2=True,
    )


_CAPABILITIES: dict[Kind, Capabilities] = {
    Kind.ORIGINAL: Capabilities(
        keys=15,
        columns=5,
        image_size=(72, 72),
        image_mode=ImageMode.BMP,
        colour_order=ColourOrder.BGR,
        rotation=Rotation.ROT_0,
        mirror=Mirror.HORIZONTAL,
        key_direction=KeyDirection.RIGHT_TO_LEFT,
        key_data_offset=0,
        image_report_len=8191,
        image_report_header_len=16,
        image_base=bmp_header(72, 72),
        is_v2=False,
    ),
    Kind.MINI: Capabilities(
        keys=6,
        columns=3,
        image_size=(80, 80),
        image_mode=ImageMode.BMP,
        colour_order=ColourOrder.BGR,
        rotation=Rotation.ROT_270,
        mirror=Mirror.NONE,
        key_direction=KeyDirection.LEFT_TO_RIGHT,
        key_data_offset=0,
        image_report_len=1024,
        image_report_header_len=16,
        image_base=bmp_header(80, 80),
        is_v2=False,
    ),
    Kind.ORIGINAL_V2: _v2(15, 5, 72, Rotation.ROT_180),
    Kind.XL: _v2(32, 8, 96, Rotation.ROT_180),
    Kind.MK2: _v2(15, 5, 72, Rotation.ROT_180),
    Kind.PLUS: _v2(8, 4, 120, Rotation.ROT_0),
}

PID_TO_KIND: dict[int, Kind] = {
    PID_ORIGINAL: Kind.ORIGINAL,
    PID_ORIGINAL_V2: Kind.ORIGINAL_V2,
    PID_MINI: Kind.MINI,
    PID_XL: Kind.XL,
    PID_MK2: Kind.MK2,
    PID_PLUS: Kind.PLUS,
}


def capabilities(kind: Kind) -> Capabilities:
    """Look up the protocol constants for a device model."""
    return _CAPABILITIES[kind]


def kind_for_pid(pid: int) -> Kind:
    """Map a USB product ID to a device model.

    Raises:
        UnrecognisedPIDError: If the product ID is not supported.
    """
    try:
        return PID_TO_KIND[pid]
    except KeyError as e:
        raise UnrecognisedPIDError(pid) from e


def device_name(kind: Kind) -> str:
    """Get the human-readable name for a device model."""
    names = {
        Kind.ORIGINAL: "Stream Deck",
        Kind.ORIGINAL_V2: "Stream Deck (V2)",
        Kind.MINI: "Stream Deck Mini",
        Kind.XL: "Stream Deck XL",
        Kind.MK2: "Stream Deck MK.2",
        Kind.PLUS: "Stream Deck +",
    }
    return names[kind]
