"""Raw-mode terminal used by the interactive ``jump`` command.

``ProcessTerminal`` takes over the process's tty for the length of one
session: alternate screen, hidden cursor, raw stdin. Keystrokes are read by
an asyncio reader, decoded by :class:`~fuzzy_motion.stdin_buffer.InputBuffer`
and handed out one code at a time by :meth:`ProcessTerminal.getchar`.
"""

from __future__ import annotations

import asyncio
import os
import sys
import termios
import tty
from typing import Protocol

from fuzzy_motion.stdin_buffer import InputBuffer

_ENTER_SESSION = "\x1b[?1049h\x1b[?25l"
_LEAVE_SESSION = "\x1b[?25h\x1b[?1049l"

_DEFAULT_SIZE = os.terminal_size((80, 24))


class Terminal(Protocol):
    """What the renderer and session need from a terminal."""

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def write(self, data: str) -> None: ...

    async def getchar(self) -> int: ...


class ProcessTerminal:
    """Terminal backed by the process's stdin and stdout.

    :meth:`start` must run inside the event loop that will call
    :meth:`getchar`; :meth:`stop` undoes everything and is safe to call twice.
    """

    def __init__(self) -> None:
        self._saved_mode: list | None = None
        self._input: InputBuffer | None = None
        self._keys: asyncio.Queue[int] = asyncio.Queue()

    def _size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(sys.stdout.fileno())
        except (ValueError, OSError):
            return _DEFAULT_SIZE

    @property
    def columns(self) -> int:
        return self._size().columns

    @property
    def rows(self) -> int:
        return self._size().lines

    def start(self) -> None:
        fd = sys.stdin.fileno()
        self._saved_mode = termios.tcgetattr(fd)
        tty.setraw(fd)
        self.write(_ENTER_SESSION)

        self._input = InputBuffer(self._keys.put_nowait)
        asyncio.get_running_loop().add_reader(fd, self._read_stdin)

    def stop(self) -> None:
        fd = sys.stdin.fileno()

        if self._input is not None:
            try:
                asyncio.get_running_loop().remove_reader(fd)
            except RuntimeError:
                pass
            self._input.close()
            self._input = None

        if self._saved_mode is not None:
            self.write(_LEAVE_SESSION)
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None

    async def getchar(self) -> int:
        return await self._keys.get()

    def _read_stdin(self) -> None:
        try:
            chunk = os.read(sys.stdin.fileno(), 4096)
        except OSError:
            return
        if chunk and self._input is not None:
            self._input.feed_bytes(chunk)

    def write(self, data: str) -> None:
        sys.stdout.write(data)
        sys.stdout.flush()
