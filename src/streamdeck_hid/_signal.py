"""Signal-aware input polling for long-running readers."""

import signal
import sys
from collections.abc import Callable, Iterator
from typing import TypeVar

from streamdeck_hid.exceptions import NoDataError, ReadTimeoutError

T = TypeVar("T")


def _stop_signals() -> tuple[signal.Signals, ...]:
    if sys.platform == "win32":
        return (signal.SIGINT,)
    return (signal.SIGINT, signal.SIGTERM)


def poll(read: Callable[[], T]) -> Iterator[T]:
    """Yield the results of ``read`` until SIGINT or SIGTERM arrives.

    Reads that time out or find no new report are skipped. ``read``
    should use a bounded timeout, since a stop request is only noticed
    between reads. Any other error ends the loop and propagates.

    Example:
        for event in poll(lambda: deck.read_input(timeout=0.5)):
            print(event)

    The previous signal handlers are restored when the generator finishes
    or is closed.
    """
    stopped = False

    def handler(signum: int, frame: object) -> None:
        nonlocal stopped
        stopped = True

    previous = {sig: signal.signal(sig, handler) for sig in _stop_signals()}
    try:
        while not stopped:
            try:
                result = read()
            except (NoDataError, ReadTimeoutError):
                continue
            yield result
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
