# events.py
#
# Description:
# This file contains the input pump. A background thread waits for key
# presses and emits a heartbeat Tick at a fixed interval, merging both into
# one FIFO queue that the render loop blocks on. Key sources wrap the
# platform terminal APIs and report keys by textual-style names
# ("up", "down", "enter", "escape", or the typed character).
#

import logging
import os
import queue
import select
import sys
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 0.2
# How long to wait for the rest of an escape sequence after ESC.
ESCAPE_TIMEOUT = 0.05


@dataclass(frozen=True)
class KeyPress:
    """A single key press, named the way textual names keys."""
    key: str


@dataclass(frozen=True)
class Tick:
    """Heartbeat that forces a redraw even without input."""


@dataclass(frozen=True)
class PumpStopped:
    """Last event from a pump thread; carries the error that ended it, if any."""
    error: Optional[BaseException] = None


Event = Union[KeyPress, Tick, PumpStopped]

_CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}

# Final bytes of CSI / SS3 sequences (ESC [ A, ESC O A, ESC [ 5 ~ ...).
_ESCAPE_KEYS = {
    b"A": "up",
    b"B": "down",
    b"C": "right",
    b"D": "left",
    b"H": "home",
    b"F": "end",
    b"3~": "delete",
    b"5~": "pageup",
    b"6~": "pagedown",
}


class PosixKeySource:
    """
    Reads keys from a POSIX terminal.

    Used as a context manager: entering switches the terminal to cbreak mode
    (no echo, no line buffering, signals still delivered), leaving restores
    the saved attributes.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._fd: Optional[int] = None
        self._saved = None
        # Key read together with an ESC that did not start a sequence (Alt+key).
        self._pending: Optional[str] = None

    def __enter__(self) -> "PosixKeySource":
        import termios
        import tty

        self._fd = self.stream.fileno()
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(self, *exc_info) -> None:
        import termios

        if self._fd is not None and self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
        self._saved = None

    @property
    def fd(self) -> int:
        return self._fd if self._fd is not None else self.stream.fileno()

    def poll(self, timeout: float) -> bool:
        if self._pending is not None:
            return True
        readable, _, _ = select.select([self.fd], [], [], timeout)
        return bool(readable)

    def read(self) -> Optional[str]:
        if self._pending is not None:
            key, self._pending = self._pending, None
            return key
        data = os.read(self.fd, 1)
        if not data:
            return None
        if data == b"\x1b":
            return self._read_escape()
        return self._decode(data)

    def _decode(self, data: bytes) -> str:
        first = data[0]
        if first >= 0xC0:
            # UTF-8 lead byte: pull in the continuation bytes.
            data += os.read(self.fd, 1 if first < 0xE0 else 2 if first < 0xF0 else 3)
        char = data.decode("utf-8", errors="replace")
        return _CONTROL_KEYS.get(char, char)

    def _read_escape(self) -> Optional[str]:
        if not self.poll(ESCAPE_TIMEOUT):
            return "escape"
        data = os.read(self.fd, 1)
        if not data:
            return "escape"
        if data not in (b"[", b"O"):
            self._pending = "escape" if data == b"\x1b" else self._decode(data)
            return "escape"
        sequence = b""
        while self.poll(ESCAPE_TIMEOUT):
            byte = os.read(self.fd, 1)
            sequence += byte
            if 0x40 <= byte[0] <= 0x7E:
                break
        return _ESCAPE_KEYS.get(sequence)


class WindowsKeySource:
    """Reads keys from the Windows console through msvcrt."""

    _SCAN_CODES = {"H": "up", "P": "down", "K": "left", "M": "right", "I": "pageup", "Q": "pagedown"}

    def __enter__(self) -> "WindowsKeySource":
        return self

    def __exit__(self, *exc_info) -> None:
        pass

    def poll(self, timeout: float) -> bool:
        import msvcrt

        deadline = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True

    def read(self) -> Optional[str]:
        import msvcrt

        char = msvcrt.getwch()
        if char in ("\x00", "\xe0"):
            return self._SCAN_CODES.get(msvcrt.getwch())
        if char == "\x1b":
            return "escape"
        return _CONTROL_KEYS.get(char, char)


def default_key_source():
    return WindowsKeySource() if os.name == "nt" else PosixKeySource()


class InputPump:
    """
    Merges key presses and periodic ticks into a single ordered queue.

    Each step waits for a key until the tick deadline. A key is queued as
    soon as it is read and leaves the deadline alone; once the deadline has
    passed a Tick is queued and the deadline moves to now + tick_rate.
    """

    def __init__(
        self,
        source,
        events: "queue.Queue[Event]",
        tick_rate: float = DEFAULT_TICK_RATE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.events = events
        self.tick_rate = tick_rate
        self.clock = clock
        self._deadline = clock() + tick_rate
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def pump_once(self) -> None:
        timeout = max(0.0, self._deadline - self.clock())
        if self.source.poll(timeout):
            key = self.source.read()
            if key is not None:
                self.events.put(KeyPress(key))

        if self.clock() >= self._deadline:
            self.events.put(Tick())
            self._deadline = self.clock() + self.tick_rate

    def run(self) -> None:
        """
        Pumps events until stop() is called or the key source fails.

        The last event queued is always a PumpStopped, so a consumer blocked
        on the queue wakes up. A failure is logged and handed over in it.
        """
        error: Optional[BaseException] = None
        try:
            while not self._stop.is_set():
                self.pump_once()
        except Exception as exc:
            logger.exception("Input pump stopped")
            error = exc
        finally:
            self.events.put(PumpStopped(error))

    def start(self) -> None:
        self._thread = threading.Thread(target=self.run, name="input-pump", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
