"""Tests for commands module."""

import struct

import pytest

from streamdeck_hid.commands import (
    brightness_report,
    parse_version,
    reset_report,
    version_request_id,
    write_image_header,
)
from streamdeck_hid.exceptions import DeviceCommunicationError
from streamdeck_hid.kinds import Kind


class TestReset:
    """Tests for reset_report function."""

    def test_v2(self) -> None:
        """V2 devices reset with 03 02."""
        report = reset_report(Kind.MK2)
        assert report == bytes([0x03, 0x02]) + bytes(15)

    def test_legacy(self) -> None:
        """Legacy devices reset with 0b 63."""
        report = reset_report(Kind.ORIGINAL)
        assert report == bytes([0x0B, 0x63]) + bytes(15)

    def test_length(self, any_kind: Kind) -> None:
        """Feature reports are always 17 bytes."""
        assert len(reset_report(any_kind)) == 17


class TestBrightness:
    """Tests for brightness_report function."""

    def test_v2(self) -> None:
        """V2 devices set brightness with 03 08 <percent>."""
        report = brightness_report(Kind.XL, 42)
        assert report[:3] == bytes([0x03, 0x08, 42])
        assert len(report) == 17

    def test_legacy(self) -> None:
        """Legacy devices set brightness with 05 55 aa d1 01 <percent>."""
        report = brightness_report(Kind.MINI, 42)
        assert report[:6] == bytes([0x05, 0x55, 0xAA, 0xD1, 0x01, 42])
        assert all(b == 0 for b in report[6:])

    def test_clamps_to_100(self, any_kind: Kind) -> None:
        """Values above 100 encode the same as 100."""
        assert brightness_report(any_kind, 150) == brightness_report(any_kind, 100)

    def test_clamps_negative_to_zero(self) -> None:
        """Negative values encode as zero."""
        assert brightness_report(Kind.MK2, -5) == brightness_report(Kind.MK2, 0)


class TestVersion:
    """Tests for version request and parsing."""

    def test_request_ids(self) -> None:
        """V2 devices use report 0x05, legacy devices 0x04."""
        assert version_request_id(Kind.PLUS) == 0x05
        assert version_request_id(Kind.ORIGINAL) == 0x04

    def test_parse_v2(self) -> None:
        """V2 version strings start at offset 6."""
        response = bytes([0x05, 0x0C, 0xFE, 0x1B, 0x7A, 0x2E]) + b"1.00.004" + bytes(3)
        assert parse_version(Kind.MK2, response) == "1.00.004"

    def test_parse_legacy(self) -> None:
        """Legacy version strings start at offset 5."""
        response = bytes([0x04, 0x55, 0xAA, 0xD4, 0x04]) + b"2.1.6" + bytes(7)
        assert parse_version(Kind.ORIGINAL, response) == "2.1.6"

    def test_parse_accepts_list(self) -> None:
        """hidapi returns lists of ints."""
        response = [0x04, 0, 0, 0, 0] + list(b"3.0")
        assert parse_version(Kind.MINI, bytes(response)) == "3.0"

    def test_parse_invalid_utf8(self) -> None:
        """Undecodable versions raise DeviceCommunicationError."""
        response = bytes(6) + b"\xff\xfe"
        with pytest.raises(DeviceCommunicationError, match="Malformed"):
            parse_version(Kind.MK2, response)


class TestImageHeader:
    """Tests for write_image_header function."""

    def test_v2_layout(self) -> None:
        """02 07 <key> <last> <len:le16> <seq:le16>."""
        buf = bytearray(8)
        write_image_header(Kind.XL, buf, 7, 0x0102, True, 1016)
        assert buf[:4] == bytes([0x02, 0x07, 7, 1])
        assert struct.unpack_from("<HH", buf, 4) == (1016, 0x0102)

    def test_legacy_layout(self) -> None:
        """02 01 <seq:le16> <last> <key>."""
        buf = bytearray(16)
        write_image_header(Kind.MINI, buf, 3, 0x0201, False, 999)
        assert buf[:6] == bytes([0x02, 0x01, 0x01, 0x02, 0, 3])
        assert all(b == 0 for b in buf[6:])

    def test_not_last(self) -> None:
        """is_last=False encodes as zero."""
        buf = bytearray(8)
        write_image_header(Kind.MK2, buf, 0, 0, False, 0)
        assert buf[3] == 0
