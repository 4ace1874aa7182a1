"""Key codes understood by the motion session, and terminal input decoding.

The session consumes integer codes: printable ASCII 32..126 plus a handful of
control codes. :func:`key_code` turns one complete terminal input sequence
(as split by :func:`~fuzzy_motion.stdin_buffer.split_sequences`) into a code.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CTRL_H = 8
ENTER = 13
CTRL_W = 23
ESCAPE = 27
SPACE = 32
TILDE = 126
BACKSPACE = 128

# Returned for input the session has no use for (arrows, function keys...).
UNKNOWN = -1

BACKSPACE_CODES: frozenset[int] = frozenset({BACKSPACE, CTRL_H})

# Raw single-character inputs whose code differs from ``ord``.
_RAW_CODES: dict[str, int] = {
    "\x7f": BACKSPACE,
}


def is_printable(code: int) -> bool:
    return SPACE <= code <= TILDE


def key_code(data: str) -> int:
    """Map one complete input sequence to a key code."""
    if not data:
        return UNKNOWN
    if data in _RAW_CODES:
        return _RAW_CODES[data]
    if len(data) == 1:
        return ord(data)
    # alt+backspace arrives as ESC DEL and deletes the word, as ctrl+w does.
    if data == "\x1b\x7f":
        return CTRL_W
    return UNKNOWN
