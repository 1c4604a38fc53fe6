"""Unbuffered, non-echoing keyboard input on a terminal."""

from __future__ import annotations

import os
import select
import sys
import termios


class Terminal:
    """Switch a terminal to raw key input and poll it for key presses."""

    def __init__(self, fd: int | None = None) -> None:
        self._fd = fd
        self._saved: list | None = None
        self._raw = False

    @property
    def fd(self) -> int:
        return sys.stdin.fileno() if self._fd is None else self._fd

    def raw_mode(self) -> "Terminal":
        """Turn off line buffering and echo, with reads that never block."""
        if self._raw:
            return self
        attrs = termios.tcgetattr(self.fd)
        self._saved = [*attrs[:6], list(attrs[6])]
        new = [*attrs[:6], list(attrs[6])]
        new[3] &= ~(termios.ICANON | termios.ECHO)
        new[6][termios.VTIME] = 0
        new[6][termios.VMIN] = 0
        termios.tcsetattr(self.fd, termios.TCSANOW, new)
        self._raw = True
        return self

    def restore(self) -> None:
        """Put back the settings saved by raw_mode and drop pending input."""
        if self._saved is None:
            return
        termios.tcsetattr(self.fd, termios.TCSANOW, self._saved)
        termios.tcflush(self.fd, termios.TCIFLUSH)
        self._raw = False

    def kbhit(self) -> bool:
        """Whether a key is waiting to be read."""
        ready, _, _ = select.select([self.fd], [], [], 0)
        return bool(ready)

    def getch(self) -> str:
        """Read one key; an empty string when nothing could be read."""
        try:
            data = os.read(self.fd, 1)
        except OSError:
            return ""
        return data.decode("latin-1")

    def __enter__(self) -> "Terminal":
        return self.raw_mode()

    def __exit__(self, *exc_info) -> None:
        self.restore()