"""Key index translation between logical and device-native numbering.

Logical indices count from zero, left to right, top to bottom. Most
devices use the same numbering natively. The original Stream Deck counts
each row right to left starting from one.
"""

from streamdeck_hid.exceptions import InvalidKeyIndexError
from streamdeck_hid.kinds import KeyDirection, Kind


def translate_key_index(kind: Kind, key: int) -> int:
    """Map a logical key index to the device-native index.

    Args:
        kind: The device model.
        key: Zero-based logical key index.

    Returns:
        The index the device uses for the key in its reports.

    Raises:
        InvalidKeyIndexError: If the key is out of range for the device.
    """
    caps = kind.capabilities
    if not 0 <= key < caps.keys:
        msg = f"Key index {key} out of range for {caps.keys}-key device"
        raise InvalidKeyIndexError(msg)

    if caps.key_direction == KeyDirection.LEFT_TO_RIGHT:
        return key

    cols = caps.columns
    row, col = divmod(key, cols)
    return row * cols + cols - col


def native_to_logical(kind: Kind, native: int) -> int:
    """Map a device-native key index back to its logical index.

    Raises:
        InvalidKeyIndexError: If no logical key maps to ``native``.
    """
    caps = kind.capabilities
    if caps.key_direction == KeyDirection.LEFT_TO_RIGHT:
        if not 0 <= native < caps.keys:
            msg = f"Native key index {native} out of range"
            raise InvalidKeyIndexError(msg)
        return native

    # Right-to-left layouts are one-based
    if not 1 <= native <= caps.keys:
        msg = f"Native key index {native} out of range"
        raise InvalidKeyIndexError(msg)
    cols = caps.columns
    row = (native - 1) // cols
    return row * cols + cols - (native - row * cols)
