"""Command-line interface for Stream Deck devices."""

import argparse
import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

from streamdeck_hid import __version__
from streamdeck_hid._signal import poll
from streamdeck_hid.device import StreamDeck, connect
from streamdeck_hid.exceptions import StreamDeckError
from streamdeck_hid.images import Colour, ImageOptions
from streamdeck_hid.kinds import device_name

logger = logging.getLogger(__name__)

# Reads in continuous mode time out regularly so Ctrl+C is noticed
POLL_TIMEOUT = 0.5

MAIN_EPILOG = """\
examples:
  streamdeck version                   Show the firmware version
  streamdeck brightness 60             Set display brightness to 60%
  streamdeck colour 0 ff8800           Fill key 0 with orange
  streamdeck image 3 logo.png          Show an image on key 3
  streamdeck input --continuous        Print input events until Ctrl+C

device selection:
  --vid/--pid take hex values and default to $USB_VID/$USB_PID
  (0fd9/0063). --serial defaults to $USB_SERIAL.

Use -h with any command for detailed help.
"""


def _hex_int(value: str) -> int:
    try:
        return int(value, 16)
    except ValueError as e:
        msg = f"invalid hex value: {value!r}"
        raise argparse.ArgumentTypeError(msg) from e


def _colour(value: str) -> Colour:
    try:
        return Colour.from_hex(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _run(args: argparse.Namespace, action: Callable[[StreamDeck], None]) -> int:
    """Open the device, run ``action`` and map errors to an exit code."""
    try:
        with connect(args.pid, vid=args.vid, serial=args.serial) as deck:
            logger.info(
                "Connected to %s (vid: %04x pid: %04x)",
                device_name(deck.kind),
                args.vid,
                args.pid,
            )
            action(deck)
        return 0
    except StreamDeckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


def cmd_reset(args: argparse.Namespace) -> int:
    """Reset the attached device."""
    return _run(args, lambda deck: deck.reset())


def cmd_version(args: argparse.Namespace) -> int:
    """Print the firmware version."""

    def action(deck: StreamDeck) -> None:
        print(f"Firmware version: {deck.version()}")

    return _run(args, action)


def cmd_brightness(args: argparse.Namespace) -> int:
    """Set display brightness."""
    if args.brightness < 0:
        print("Error: Brightness cannot be negative.", file=sys.stderr)
        return 1
    return _run(args, lambda deck: deck.set_brightness(args.brightness))


def _poll(args: argparse.Namespace, read: Callable[[StreamDeck, float | None], object]) -> int:
    """Read once, or keep reading until interrupted with --continuous."""
    if args.timeout is not None and args.timeout <= 0:
        print("Error: Timeout must be positive.", file=sys.stderr)
        return 1

    timeout = args.timeout
    if timeout is None and args.continuous:
        timeout = POLL_TIMEOUT

    def action(deck: StreamDeck) -> None:
        if not args.continuous:
            print(read(deck, timeout))
            return
        for result in poll(lambda: read(deck, timeout)):
            print(result)

    return _run(args, action)


def cmd_buttons(args: argparse.Namespace) -> int:
    """Print key states."""
    return _poll(args, lambda deck, timeout: list(deck.read_buttons(timeout)))


def cmd_input(args: argparse.Namespace) -> int:
    """Print decoded input events."""
    return _poll(args, lambda deck, timeout: deck.read_input(timeout))


def cmd_colour(args: argparse.Namespace) -> int:
    """Fill a key with a solid colour."""
    logger.info("Setting key %d colour to %s", args.key, args.colour)
    return _run(args, lambda deck: deck.set_button_rgb(args.key, args.colour))


def cmd_image(args: argparse.Namespace) -> int:
    """Show an image file on a key."""
    if not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1
    options = ImageOptions(background=args.background, invert=args.invert)
    logger.info("Setting key %d to image %s", args.key, args.file)
    return _run(args, lambda deck: deck.set_button_file(args.key, args.file, options))


def cmd_text(args: argparse.Namespace) -> int:
    """Render text onto a key."""
    text = args.text.replace("\\n", "\n")
    return _run(args, lambda deck: deck.set_button_text(args.key, text))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="streamdeck",
        description="Control Elgato Stream Deck devices over USB HID.",
        epilog=MAIN_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--vid",
        type=_hex_int,
        default=_hex_int(os.environ.get("USB_VID", "0fd9")),
        help="USB vendor ID in hex (default: $USB_VID or 0fd9)",
    )
    parser.add_argument(
        "--pid",
        type=_hex_int,
        default=_hex_int(os.environ.get("USB_PID", "0063")),
        help="USB product ID in hex (default: $USB_PID or 0063)",
    )
    parser.add_argument(
        "--serial",
        default=os.environ.get("USB_SERIAL"),
        help="USB serial number (default: $USB_SERIAL)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="logging verbosity (default: warning)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="commands",
        metavar="<command>",
    )

    reset_parser = subparsers.add_parser("reset", help="reset the attached device")
    reset_parser.set_defaults(func=cmd_reset)

    version_parser = subparsers.add_parser("version", help="show the firmware version")
    version_parser.set_defaults(func=cmd_version)

    brightness_parser = subparsers.add_parser("brightness", help="set display brightness")
    brightness_parser.add_argument(
        "brightness", type=int, metavar="PERCENT", help="brightness from 0 to 100"
    )
    brightness_parser.set_defaults(func=cmd_brightness)

    for name, func, help_text in (
        ("buttons", cmd_buttons, "print key states"),
        ("input", cmd_input, "print input events (keys, touch strip, dials)"),
    ):
        read_parser = subparsers.add_parser(name, help=help_text)
        read_parser.add_argument(
            "--timeout",
            type=float,
            metavar="SEC",
            default=None,
            help="seconds to wait for a report (default: wait forever)",
        )
        read_parser.add_argument(
            "--continuous",
            action="store_true",
            help="keep reading until interrupted",
        )
        read_parser.set_defaults(func=func)

    colour_parser = subparsers.add_parser("colour", help="fill a key with a colour")
    colour_parser.add_argument("key", type=int, help="key index")
    colour_parser.add_argument("colour", type=_colour, metavar="RRGGBB", help="hex colour")
    colour_parser.set_defaults(func=cmd_colour)

    image_parser = subparsers.add_parser("image", help="show an image file on a key")
    image_parser.add_argument("key", type=int, help="key index")
    image_parser.add_argument("file", type=Path, metavar="FILE", help="image file")
    image_parser.add_argument(
        "--background",
        type=_colour,
        metavar="RRGGBB",
        default=None,
        help="colour behind transparent areas",
    )
    image_parser.add_argument("--invert", action="store_true", help="invert colours")
    image_parser.set_defaults(func=cmd_image)

    text_parser = subparsers.add_parser("text", help="render text on a key")
    text_parser.add_argument("key", type=int, help="key index")
    text_parser.add_argument("text", help="text to render; '\\n' starts a new line")
    text_parser.set_defaults(func=cmd_text)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(levelname)s: %(message)s",
    )

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
