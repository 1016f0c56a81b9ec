"""Chunked output reports for key image uploads.

Images are larger than a single HID output report, so they are split
into a sequence of fixed-size reports, each starting with an image
header (see ``commands.write_image_header``).

The original Stream Deck always uses exactly two reports with fixed
split points. Every other model fills each report as far as it can,
with the BMP header (if any) following the image header of the first
report only.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from streamdeck_hid.commands import write_image_header
from streamdeck_hid.constants import ORIGINAL_FIRST_CHUNK, ORIGINAL_IMAGE_BYTES
from streamdeck_hid.exceptions import InvalidImageSizeError
from streamdeck_hid.images import DeviceImage
from streamdeck_hid.keys import translate_key_index
from streamdeck_hid.kinds import ImageMode, Kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImageReport:
    """One framed output report of an image transfer."""

    sequence: int
    is_last: bool
    payload_len: int
    data: bytes


def _zero(buf: bytearray) -> None:
    buf[:] = bytes(len(buf))


def _iter_original(kind: Kind, native_key: int, data: bytes) -> Iterator[ImageReport]:
    caps = kind.capabilities
    if len(data) != ORIGINAL_IMAGE_BYTES:
        msg = f"Image data must be exactly {ORIGINAL_IMAGE_BYTES} bytes, got {len(data)}"
        raise InvalidImageSizeError(msg)

    hdrlen = caps.image_report_header_len
    base = caps.image_base
    buf = bytearray(caps.image_report_len)

    write_image_header(kind, buf, native_key, 1, False, 0)
    start = hdrlen + len(base)
    buf[hdrlen:start] = base
    buf[start : start + ORIGINAL_FIRST_CHUNK] = data[:ORIGINAL_FIRST_CHUNK]
    yield ImageReport(1, False, ORIGINAL_FIRST_CHUNK, bytes(buf))

    _zero(buf)
    rest = data[ORIGINAL_FIRST_CHUNK:]
    write_image_header(kind, buf, native_key, 2, True, 0)
    buf[hdrlen : hdrlen + len(rest)] = rest
    yield ImageReport(2, True, len(rest), bytes(buf))


def _iter_chunked(kind: Kind, native_key: int, data: bytes) -> Iterator[ImageReport]:
    caps = kind.capabilities
    hdrlen = caps.image_report_header_len
    base = caps.image_base
    buf = bytearray(caps.image_report_len)
    capacity = len(buf) - hdrlen

    sequence = 0
    offset = 0
    while offset < len(data):
        _zero(buf)
        start = hdrlen
        room = capacity

        if sequence == 0 and base:
            buf[start : start + len(base)] = base
            start += len(base)
            room -= len(base)

        remaining = len(data) - offset
        take = min(remaining, room)
        is_last = take == remaining

        write_image_header(kind, buf, native_key, sequence, is_last, take)
        buf[start : start + take] = data[offset : offset + take]

        logger.debug(
            "Image chunk [%d..%d) in [%d..%d), sequence %d%s",
            offset,
            offset + take,
            start,
            start + take,
            sequence,
            " (last)" if is_last else "",
        )
        yield ImageReport(sequence, is_last, take, bytes(buf))

        sequence += 1
        offset += take


def iter_image_reports(kind: Kind, native_key: int, data: bytes) -> Iterator[ImageReport]:
    """Split device image data into framed output reports.

    Args:
        kind: The device model.
        native_key: Device-native key index (already translated).
        data: Encoded image bytes.

    Yields:
        Reports in transmission order.

    Raises:
        InvalidImageSizeError: If an original Stream Deck image is not
            exactly 15552 bytes.
    """
    if kind == Kind.ORIGINAL:
        return _iter_original(kind, native_key, data)
    return _iter_chunked(kind, native_key, data)


def write_image(
    write: Callable[[bytes], None],
    kind: Kind,
    key: int,
    image: DeviceImage,
) -> None:
    """Upload an image to a key.

    Each report is handed to ``write`` as one blocking output report
    write. The first failure aborts the transfer and propagates; the key
    may be left partially updated.

    Args:
        write: Callable performing a single output report write.
        kind: The device model.
        key: Logical key index.
        image: Image in the device's wire format.

    Raises:
        InvalidKeyIndexError: If the key is out of range.
        InvalidImageSizeError: If an uncompressed (BMP) image is not
            exactly one key in size.
    """
    native_key = translate_key_index(kind, key)
    caps = kind.capabilities
    if caps.image_mode == ImageMode.BMP and len(image) != caps.image_size_bytes:
        msg = f"Image data must be exactly {caps.image_size_bytes} bytes, got {len(image)}"
        raise InvalidImageSizeError(msg)
    for report in iter_image_reports(kind, native_key, image.data):
        write(report.data)
