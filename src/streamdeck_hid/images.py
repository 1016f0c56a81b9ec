"""Key image conversion into the device-native wire format.

Conversion runs in a fixed order: geometric normalisation (rotation, then
mirroring), channel reordering, then encoding. Orientation is therefore
independent of the colour layout the device expects.
"""

import io
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, ImageOps

from streamdeck_hid.constants import JPEG_QUALITY
from streamdeck_hid.exceptions import DeviceIOError, ImageError, InvalidImageSizeError
from streamdeck_hid.kinds import ColourOrder, ImageMode, Kind, Mirror, Rotation

# PIL transposes rotate counter-clockwise
_ROTATIONS = {
    Rotation.ROT_90: Image.Transpose.ROTATE_270,
    Rotation.ROT_180: Image.Transpose.ROTATE_180,
    Rotation.ROT_270: Image.Transpose.ROTATE_90,
}

_MIRRORS = {
    Mirror.HORIZONTAL: Image.Transpose.FLIP_LEFT_RIGHT,
    Mirror.VERTICAL: Image.Transpose.FLIP_TOP_BOTTOM,
}


@dataclass(frozen=True, slots=True)
class Colour:
    """An RGB colour, always stored in source (RGB) order."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                msg = f"Colour channel out of range: {channel}"
                raise ValueError(msg)

    @classmethod
    def from_hex(cls, value: str) -> "Colour":
        """Parse a colour from ``RRGGBB`` hex notation.

        A leading ``#`` is accepted.

        Raises:
            ValueError: If the string is not a six digit hex colour.
        """
        digits = value.removeprefix("#")
        if len(digits) != 6:
            msg = f"Expected a six digit hex colour, got {value!r}"
            raise ValueError(msg)
        rgb = bytes.fromhex(digits)
        return cls(rgb[0], rgb[1], rgb[2])

    def as_tuple(self) -> tuple[int, int, int]:
        """Return the colour as an ``(r, g, b)`` tuple."""
        return (self.r, self.g, self.b)


@dataclass(frozen=True, slots=True)
class ImageOptions:
    """Options applied when loading images from files.

    Attributes:
        background: Colour shown behind transparent pixels and around
            images whose aspect ratio does not match the key.
        invert: Invert all colours.
    """

    background: Colour | None = None
    invert: bool = False


@dataclass(frozen=True, slots=True)
class TextOptions:
    """Rendering options for text keys.

    Defaults to white text on black, 15 pixels high, with lines spaced
    at 1.1x the font size.
    """

    foreground: Colour = field(default_factory=lambda: Colour(255, 255, 255))
    background: Colour = field(default_factory=lambda: Colour(0, 0, 0))
    font_size: int = 15
    line_height: float = 1.1


@dataclass(frozen=True, slots=True)
class TextPosition:
    """Absolute position of the first line of text, in pixels."""

    x: int = 0
    y: int = 0


@dataclass(frozen=True, slots=True)
class DeviceImage:
    """A key image already in the exact byte layout the device expects."""

    data: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "DeviceImage":
        """Wrap pre-encoded image bytes without any conversion."""
        return cls(bytes(data))

    def __len__(self) -> int:
        return len(self.data)


def apply_transform(image: Image.Image, rotation: Rotation, mirror: Mirror) -> Image.Image:
    """Rotate and then mirror an image."""
    if rotation in _ROTATIONS:
        image = image.transpose(_ROTATIONS[rotation])
    if mirror in _MIRRORS:
        image = image.transpose(_MIRRORS[mirror])
    return image


def swap_channels(data: bytes) -> bytes:
    """Swap the first and third byte of every pixel triplet (RGB <-> BGR)."""
    if len(data) % 3:
        msg = f"Pixel buffer length {len(data)} is not a multiple of 3"
        raise InvalidImageSizeError(msg)
    out = bytearray(data)
    out[0::3] = data[2::3]
    out[2::3] = data[0::3]
    return bytes(out)


def _check_size(kind: Kind, data: bytes) -> None:
    expected = kind.capabilities.image_size_bytes
    if len(data) != expected:
        msg = f"Image data must be exactly {expected} bytes, got {len(data)}"
        raise InvalidImageSizeError(msg)


def encode(kind: Kind, native: bytes) -> DeviceImage:
    """Encode a device-native pixel buffer for the wire.

    Args:
        kind: The device model.
        native: Pixel triplets already oriented and in device colour order.

    Raises:
        InvalidImageSizeError: If the buffer does not match the key size.
        ImageError: If JPEG encoding fails.
    """
    _check_size(kind, native)
    caps = kind.capabilities
    if caps.image_mode == ImageMode.BMP:
        return DeviceImage(bytes(native))

    try:
        image = Image.frombytes("RGB", caps.image_size, bytes(native))
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    except (OSError, ValueError) as e:
        msg = f"Failed to encode JPEG key image: {e}"
        raise ImageError(msg) from e
    return DeviceImage(buffer.getvalue())


def _to_native(kind: Kind, image: Image.Image) -> bytes:
    """Orient an RGB image and pack it in device colour order."""
    caps = kind.capabilities
    image = apply_transform(image, caps.rotation, caps.mirror)
    data = image.tobytes()
    if caps.colour_order == ColourOrder.BGR:
        data = swap_channels(data)
    return data


def convert(kind: Kind, pixels: bytes, options: ImageOptions | None = None) -> DeviceImage:
    """Convert a raw RGB8 pixel buffer of key size into a device image.

    Args:
        kind: The device model.
        pixels: Row-major RGB triplets, exactly the size of one key.
        options: Optional colour inversion. The background option has no
            effect on opaque RGB input.

    Raises:
        InvalidImageSizeError: If the buffer does not match the key size.
        ImageError: If encoding fails.
    """
    _check_size(kind, pixels)
    image = Image.frombytes("RGB", kind.capabilities.image_size, bytes(pixels))
    if options is not None and options.invert:
        image = ImageOps.invert(image)
    return encode(kind, _to_native(kind, image))


def prepare_image(kind: Kind, image: Image.Image, options: ImageOptions | None = None) -> bytes:
    """Turn a decoded image of any size into a device-native pixel buffer.

    The image is scaled to fit the key, keeping its aspect ratio, and
    centred on the background colour.
    """
    options = options or ImageOptions()
    background = options.background or Colour(0, 0, 0)

    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        base = Image.new("RGBA", rgba.size, (*background.as_tuple(), 255))
        image = Image.alpha_composite(base, rgba)
    image = image.convert("RGB")

    size = kind.capabilities.image_size
    if image.size != size:
        image = ImageOps.pad(image, size, color=background.as_tuple())
    if options.invert:
        image = ImageOps.invert(image)

    return _to_native(kind, image)


def solid_colour(kind: Kind, colour: Colour) -> DeviceImage:
    """Build a device image filled with a single colour."""
    pixels = bytes(colour.as_tuple()) * (kind.capabilities.image_size_bytes // 3)
    if kind.capabilities.colour_order == ColourOrder.BGR:
        pixels = swap_channels(pixels)
    return encode(kind, pixels)


def load_image(kind: Kind, path: Path | str, options: ImageOptions | None = None) -> DeviceImage:
    """Load an image file and convert it into a device image.

    Raises:
        DeviceIOError: If the file cannot be read.
        ImageError: If the file cannot be decoded.
    """
    try:
        with Image.open(path) as im:
            im.load()
            native = prepare_image(kind, im, options)
    except (FileNotFoundError, IsADirectoryError, PermissionError) as e:
        msg = f"Cannot read image file: {path}"
        raise DeviceIOError(msg) from e
    except Image.DecompressionBombError as e:
        msg = f"Image too large (potential decompression bomb): {path}"
        raise ImageError(msg) from e
    except OSError as e:
        msg = f"Failed to open image: {path}"
        raise ImageError(msg) from e
    return encode(kind, native)


def render_text(
    kind: Kind,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None,
    position: TextPosition | None = None,
    options: TextOptions | None = None,
) -> Image.Image:
    """Render text onto a key-sized image.

    Lines are split on ``\\n``; each line advances by
    ``font_size * line_height`` pixels.
    """
    options = options or TextOptions()
    position = position or TextPosition()
    if font is None:
        font = ImageFont.load_default(size=options.font_size)

    image = Image.new("RGB", kind.capabilities.image_size, options.background.as_tuple())
    draw = ImageDraw.Draw(image)

    step = round(options.font_size * options.line_height)
    y = position.y
    for line in text.split("\n"):
        draw.text((position.x, y), line, font=font, fill=options.foreground.as_tuple())
        y += step
    return image
