"""Text utilities: display width measurement and byte/character columns.

Buffer positions are byte columns (the way editors report them) while Python
strings index by code point, so every consumer that slices a line converts
through the helpers here.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (multi-codepoint with VS16, ZWJ, skin tones, flags) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the terminal display width of *text* (tabs count as 1)."""
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(text):
        total += _grapheme_width(g)
    return _cache_width(text, total)


def char_width(char: str) -> int:
    """Display width of one character, at least 1 so overlays stay visible."""
    return max(visible_width(char), 1)


# ---------------------------------------------------------------------------
# Byte <-> character columns
# ---------------------------------------------------------------------------

def byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def char_to_byte_offset(text: str, index: int) -> int:
    """Byte offset of the character at *index* in *text*."""
    return byte_length(text[:index])


def byte_to_char_index(text: str, offset: int) -> int:
    """Index of the character that starts at (or contains) byte *offset*."""
    if offset <= 0:
        return 0
    prefix = text.encode("utf-8")[:offset]
    return len(prefix.decode("utf-8", errors="ignore"))
