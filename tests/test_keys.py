"""Tests for fuzzy_motion.keys -- terminal input to key codes."""

from __future__ import annotations

import pytest

from fuzzy_motion.keys import (
    BACKSPACE,
    CTRL_H,
    CTRL_W,
    ENTER,
    ESCAPE,
    UNKNOWN,
    is_printable,
    key_code,
)


class TestKeyCode:
    @pytest.mark.parametrize(
        ("data", "code"),
        [
            ("a", 97),
            ("Z", 90),
            (" ", 32),
            ("~", 126),
            ("\r", ENTER),
            ("\x1b", ESCAPE),
            ("\x08", CTRL_H),
            ("\x7f", BACKSPACE),
            ("\x17", CTRL_W),
            ("\x1b\x7f", CTRL_W),
        ],
    )
    def test_known_inputs(self, data: str, code: int) -> None:
        assert key_code(data) == code

    @pytest.mark.parametrize("data", ["", "\x1b[A", "\x1bOP", "\x1b[3~", "\x1bb"])
    def test_sequences_are_unknown(self, data: str) -> None:
        assert key_code(data) == UNKNOWN

    def test_non_ascii_char_keeps_codepoint(self) -> None:
        assert key_code("é") == 233
        assert not is_printable(233)


class TestIsPrintable:
    def test_range_bounds(self) -> None:
        assert is_printable(32)
        assert is_printable(126)
        assert not is_printable(31)
        assert not is_printable(127)
        assert not is_printable(BACKSPACE)
