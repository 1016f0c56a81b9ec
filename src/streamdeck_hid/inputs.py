"""Input report decoding.

Report layout (byte 0 is the report ID, non-zero when data is present):

- ``[1:3] == 00 08``: key states, one byte per key, after the device's
  key data offset.
- ``[1:3] == 02 0e``: touch strip event; ``[4:6]`` selects short press
  (01 01), long press (02 01) or swipe (03 00). ``x`` is a little-endian
  16-bit value at offset 6, ``y`` a single byte at offset 8, and a
  swipe's end ``x`` a 16-bit value at offset 10.
- ``[1:3] == 03 05``: dial event; ``[4]`` selects press (0) or rotate (1)
  with one byte per dial at offsets 5-8.

The touch and dial sub-types are only partially documented. Unknown
sub-types decode to ``OtherInput`` instead of failing.
"""

import struct
from dataclasses import dataclass

from streamdeck_hid.constants import INPUT_REPORT_SIZE
from streamdeck_hid.exceptions import NoDataError
from streamdeck_hid.keys import translate_key_index
from streamdeck_hid.kinds import KeyDirection, Kind

TAG_BUTTON = (0x00, 0x08)
TAG_TOUCH = (0x02, 0x0E)
TAG_KNOB = (0x03, 0x05)

TOUCH_SHORT = (0x01, 0x01)
TOUCH_LONG = (0x02, 0x01)
TOUCH_SWIPE = (0x03, 0x00)

KNOB_PRESS = 0x00
KNOB_ROTATE = 0x01

KNOB_COUNT = 4


@dataclass(frozen=True, slots=True)
class ButtonInput:
    """Key states in logical order; non-zero means pressed."""

    states: tuple[int, ...]

    @property
    def pressed(self) -> tuple[int, ...]:
        """Logical indices of all pressed keys."""
        return tuple(i for i, state in enumerate(self.states) if state)


@dataclass(frozen=True, slots=True)
class TouchShort:
    """Short tap on the touch strip."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class TouchLong:
    """Long press on the touch strip."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class TouchSwipe:
    """Swipe across the touch strip.

    The device reports no separate end row, so ``y1`` equals ``y0``.
    """

    x0: int
    y0: int
    x1: int
    y1: int


@dataclass(frozen=True, slots=True)
class KnobPress:
    """Raw press state of each dial."""

    states: bytes


@dataclass(frozen=True, slots=True)
class KnobRotate:
    """Signed rotation delta of each dial since the last report."""

    deltas: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class OtherInput:
    """A report this decoder does not recognise."""

    report: bytes


TouchInput = TouchShort | TouchLong | TouchSwipe
KnobInput = KnobPress | KnobRotate
Input = ButtonInput | TouchInput | KnobInput | OtherInput


def _normalise(report: bytes | list[int]) -> bytes:
    """Check for data and zero-extend short reports."""
    data = bytes(report)
    if not data or data[0] == 0:
        raise NoDataError
    if len(data) < INPUT_REPORT_SIZE:
        data += bytes(INPUT_REPORT_SIZE - len(data))
    return data


def _buttons(kind: Kind, data: bytes) -> tuple[int, ...]:
    caps = kind.capabilities
    offset = caps.key_data_offset
    if caps.key_direction == KeyDirection.RIGHT_TO_LEFT:
        # Native indices are one-based, which skips the report ID
        return tuple(data[offset + translate_key_index(kind, i)] for i in range(caps.keys))
    start = 1 + offset
    return tuple(data[start : start + caps.keys])


def _touch(data: bytes) -> Input:
    subtype = (data[4], data[5])
    x, y = struct.unpack_from("<HB", data, 6)
    if subtype == TOUCH_SHORT:
        return TouchShort(x, y)
    if subtype == TOUCH_LONG:
        return TouchLong(x, y)
    if subtype == TOUCH_SWIPE:
        (x1,) = struct.unpack_from("<H", data, 10)
        return TouchSwipe(x, y, x1, y)
    return OtherInput(data)


def _knob(data: bytes) -> Input:
    subtype = data[4]
    if subtype == KNOB_PRESS:
        return KnobPress(data[5 : 5 + KNOB_COUNT])
    if subtype == KNOB_ROTATE:
        return KnobRotate(struct.unpack_from(f"<{KNOB_COUNT}b", data, 5))
    return OtherInput(data)


def decode_input(kind: Kind, report: bytes | list[int]) -> Input:
    """Decode a raw input report into a typed event.

    Args:
        kind: The device model that produced the report.
        report: Raw report bytes including the report ID.

    Raises:
        NoDataError: If the report is empty or its first byte is zero.
    """
    data = _normalise(report)
    tag = (data[1], data[2])
    if tag == TAG_BUTTON:
        return ButtonInput(_buttons(kind, data))
    if tag == TAG_TOUCH:
        return _touch(data)
    if tag == TAG_KNOB:
        return _knob(data)
    return OtherInput(data)


def decode_buttons(kind: Kind, report: bytes | list[int]) -> tuple[int, ...]:
    """Decode key states from a raw report, ignoring its type tag.

    Raises:
        NoDataError: If the report is empty or its first byte is zero.
    """
    return _buttons(kind, _normalise(report))
