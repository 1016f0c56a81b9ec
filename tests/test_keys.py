"""Tests for keys module."""

import pytest

from streamdeck_hid.exceptions import InvalidKeyIndexError
from streamdeck_hid.keys import native_to_logical, translate_key_index
from streamdeck_hid.kinds import KeyDirection, Kind


class TestTranslateKeyIndex:
    """Tests for translate_key_index function."""

    def test_left_to_right_is_identity(self) -> None:
        """Left-to-right devices use logical indices natively."""
        for key in range(Kind.XL.capabilities.keys):
            assert translate_key_index(Kind.XL, key) == key

    def test_original_first_row(self) -> None:
        """The original counts each row right to left from one."""
        assert [translate_key_index(Kind.ORIGINAL, k) for k in range(5)] == [5, 4, 3, 2, 1]

    def test_original_second_row(self) -> None:
        """Row order is preserved."""
        assert [translate_key_index(Kind.ORIGINAL, k) for k in range(5, 10)] == [
            10,
            9,
            8,
            7,
            6,
        ]

    def test_bijection(self, any_kind: Kind) -> None:
        """Translation maps every key to a distinct native index."""
        keys = any_kind.capabilities.keys
        native = {translate_key_index(any_kind, k) for k in range(keys)}
        assert len(native) == keys

    def test_right_to_left_never_maps_to_zero(self) -> None:
        """Native index zero is the report ID on right-to-left devices."""
        native = {translate_key_index(Kind.ORIGINAL, k) for k in range(15)}
        assert native == set(range(1, 16))

    @pytest.mark.parametrize("key", [-1, 15, 200])
    def test_out_of_range(self, key: int) -> None:
        """Keys outside the device range are rejected."""
        with pytest.raises(InvalidKeyIndexError):
            translate_key_index(Kind.MK2, key)

    def test_key_count_is_out_of_range(self) -> None:
        """The key count itself is not a valid index."""
        with pytest.raises(InvalidKeyIndexError):
            translate_key_index(Kind.ORIGINAL, 15)


class TestNativeToLogical:
    """Tests for native_to_logical function."""

    def test_inverse(self, any_kind: Kind) -> None:
        """native_to_logical undoes translate_key_index."""
        for key in range(any_kind.capabilities.keys):
            assert native_to_logical(any_kind, translate_key_index(any_kind, key)) == key

    def test_original_native_zero_is_invalid(self) -> None:
        """Right-to-left native indices start at one."""
        assert Kind.ORIGINAL.capabilities.key_direction == KeyDirection.RIGHT_TO_LEFT
        with pytest.raises(InvalidKeyIndexError):
            native_to_logical(Kind.ORIGINAL, 0)

    def test_left_to_right_out_of_range(self) -> None:
        """Native indices past the key count are rejected."""
        with pytest.raises(InvalidKeyIndexError):
            native_to_logical(Kind.MINI, 6)
