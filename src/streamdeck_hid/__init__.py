"""Stream Deck HID - Drive Elgato Stream Deck devices over USB HID.

This package translates key images, brightness and reset commands into
the report sequences each Stream Deck model expects, and decodes input
reports into typed key, touch strip and dial events.

Example:
    from streamdeck_hid import Colour, connect

    with connect(0x006D) as deck:
        deck.set_brightness(60)
        deck.set_button_rgb(0, Colour(255, 0, 0))
        print(deck.read_input(timeout=1.0))
"""

from streamdeck_hid.constants import SUPPORTED_PIDS, VENDOR_ID
from streamdeck_hid.device import StreamDeck, connect
from streamdeck_hid.exceptions import (
    DeviceCommunicationError,
    DeviceIOError,
    ImageError,
    InvalidImageSizeError,
    InvalidKeyIndexError,
    NoDataError,
    ReadTimeoutError,
    StreamDeckError,
    UnrecognisedPIDError,
)
from streamdeck_hid.images import (
    Colour,
    DeviceImage,
    ImageOptions,
    TextOptions,
    TextPosition,
)
from streamdeck_hid.inputs import (
    ButtonInput,
    Input,
    KnobPress,
    KnobRotate,
    OtherInput,
    TouchLong,
    TouchShort,
    TouchSwipe,
)
from streamdeck_hid.kinds import Capabilities, Kind, kind_for_pid

__version__ = "0.1.0"

__all__ = [
    "SUPPORTED_PIDS",
    "VENDOR_ID",
    "ButtonInput",
    "Capabilities",
    "Colour",
    "DeviceCommunicationError",
    "DeviceIOError",
    "DeviceImage",
    "ImageError",
    "ImageOptions",
    "Input",
    "InvalidImageSizeError",
    "InvalidKeyIndexError",
    "Kind",
    "KnobPress",
    "KnobRotate",
    "NoDataError",
    "OtherInput",
    "ReadTimeoutError",
    "StreamDeck",
    "StreamDeckError",
    "TextOptions",
    "TextPosition",
    "TouchLong",
    "TouchShort",
    "TouchSwipe",
    "UnrecognisedPIDError",
    "__version__",
    "connect",
    "kind_for_pid",
]
