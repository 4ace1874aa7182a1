"""Turn raw stdin chunks into session key codes.

Escape sequences can arrive split across reads; without buffering, the tail
of an arrow key would be typed into the query. A lone ESC looks exactly like
the start of a sequence, so whatever is still pending after a short timeout
is decoded as-is. That is how Escape reaches the session.
"""

from __future__ import annotations

import asyncio
import codecs
from enum import Enum
from typing import Callable

from fuzzy_motion.keys import key_code

ESC = "\x1b"


class Completeness(str, Enum):
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    NOT_ESCAPE = "not-escape"


def classify(data: str) -> Completeness:
    """Decide whether *data* is a finished escape sequence."""
    if not data.startswith(ESC):
        return Completeness.NOT_ESCAPE
    if len(data) == 1:
        return Completeness.INCOMPLETE

    introducer = data[1]
    if introducer == "[":
        # CSI: parameters, then one final byte in 0x40..0x7E.
        if len(data) < 3:
            return Completeness.INCOMPLETE
        if 0x40 <= ord(data[-1]) <= 0x7E:
            return Completeness.COMPLETE
        return Completeness.INCOMPLETE
    if introducer == "O":
        # SS3 (F1-F4, keypad): exactly one more byte.
        return Completeness.COMPLETE if len(data) >= 3 else Completeness.INCOMPLETE

    # ESC + one character is alt+key.
    return Completeness.COMPLETE


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an unfinished remainder."""
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue

        end = pos + 1
        while classify(buffer[pos:end]) is not Completeness.COMPLETE:
            if end >= len(buffer):
                return sequences, buffer[pos:]
            end += 1

        sequences.append(buffer[pos:end])
        pos = end

    return sequences, ""


class InputBuffer:
    """Accumulates stdin text and reports one key code per complete sequence."""

    def __init__(self, on_key: Callable[[int], None], *, timeout: float = 0.01) -> None:
        self._on_key = on_key
        self._timeout = timeout
        self._pending = ""
        self._timer: asyncio.TimerHandle | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def pending(self) -> str:
        return self._pending

    def feed_bytes(self, chunk: bytes) -> None:
        """Feed raw bytes; a multibyte character split across reads is held back."""
        text = self._decoder.decode(chunk)
        if text:
            self.feed(text)

    def feed(self, data: str) -> None:
        self._cancel_timer()

        sequences, self._pending = split_sequences(self._pending + data)
        for sequence in sequences:
            self._emit(sequence)

        if not self._pending:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Nothing can fire a timer later, decode what we have.
            self.flush()
            return
        self._timer = loop.call_later(self._timeout, self.flush)

    def flush(self) -> None:
        """Decode any pending partial sequence immediately."""
        self._cancel_timer()
        if self._pending:
            data, self._pending = self._pending, ""
            self._emit(data)

    def close(self) -> None:
        self._cancel_timer()
        self._pending = ""
        self._decoder.reset()

    def _emit(self, sequence: str) -> None:
        self._on_key(key_code(sequence))

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
