"""Terminal host: a read-only view of a text buffer with jump labels.

``Viewport`` holds the buffer, the visible window and the cursor.
``TerminalRenderer`` paints labels, match highlights, shading and the
prompt over that window, and ``ViewportJumper`` moves the cursor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, Protocol

from fuzzy_motion.config import MotionConfig
from fuzzy_motion.terminal import Terminal
from fuzzy_motion.types import Position, Target, Word
from fuzzy_motion.utils import byte_to_char_index, char_width, visible_width
from fuzzy_motion.words import extract_words

PROMPT_PREFIX = "fuzzy-motion: "


# ---------------------------------------------------------------------------
# Viewport
# ---------------------------------------------------------------------------


@dataclass
class Viewport:
    """A window of *height* lines starting at line *top* (1-based)."""

    lines: list[str]
    top: int = 1
    height: int = 24
    cursor: Position = field(default_factory=lambda: Position(1, 1))
    jump_back: Position | None = None

    @property
    def bottom(self) -> int:
        return min(self.top + self.height - 1, len(self.lines))

    def line(self, number: int) -> str:
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""

    def visible_lines(self) -> list[str]:
        return self.lines[self.top - 1 : self.bottom]

    def get_words(self, config: MotionConfig) -> list[Word]:
        return extract_words(
            self.visible_lines(),
            self.top,
            config.word_patterns,
            config.filter_patterns,
        )


class ViewportJumper:
    """Moves the viewport cursor, keeping the previous spot as the jump-back mark."""

    def __init__(self, viewport: Viewport) -> None:
        self._viewport = viewport

    async def jump(self, target: Target) -> None:
        self._viewport.jump_back = self._viewport.cursor
        self._viewport.cursor = target.jump_position


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


class MotionTheme(Protocol):
    char: Callable[[str], str]
    sub_char: Callable[[str], str]
    match: Callable[[str], str]
    shade: Callable[[str], str]
    prompt: Callable[[str], str]


def _sgr(code: str) -> Callable[[str], str]:
    return lambda text: f"\x1b[{code}m{text}\x1b[0m"


@dataclass
class DefaultMotionTheme:
    char: Callable[[str], str] = field(default=_sgr("1;31"))
    sub_char: Callable[[str], str] = field(default=_sgr("1;33"))
    match: Callable[[str], str] = field(default=_sgr("1;36"))
    shade: Callable[[str], str] = field(default=_sgr("2"))
    prompt: Callable[[str], str] = field(default=lambda text: text)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


@dataclass
class _Mark:
    line: int
    index: int
    label: str
    primary: bool
    # Character span of the highlighted match, if any.
    span: tuple[int, int] | None


class TerminalRenderer:
    """Renders the viewport and mounted targets with ANSI sequences.

    Mount, unmount, shading and the prompt only update renderer state;
    :meth:`flush` repaints the whole frame in one write.
    """

    def __init__(
        self,
        terminal: Terminal,
        viewport: Viewport,
        theme: MotionTheme | None = None,
        disable_match_highlight: bool = False,
    ) -> None:
        self._terminal = terminal
        self._viewport = viewport
        self._theme = theme or DefaultMotionTheme()
        self._disable_match_highlight = disable_match_highlight
        self._marks: list[_Mark] = []
        self._shaded = False
        self._prompt: str | None = None

    @property
    def mounted(self) -> int:
        return len(self._marks)

    async def shade(self) -> None:
        self._shaded = True

    async def clear_shade(self) -> None:
        self._shaded = False

    async def prompt(self, text: str) -> None:
        self._prompt = text

    async def clear_prompt(self) -> None:
        self._prompt = None

    async def mount(self, targets: Sequence[Target]) -> None:
        for index, target in enumerate(targets):
            self._marks.append(self._make_mark(target, primary=index == 0))

    async def unmount(self) -> None:
        self._marks = []

    async def flush(self) -> None:
        self._terminal.write(self.render_frame())

    # -- frame composition --------------------------------------------------

    def _make_mark(self, target: Target, primary: bool) -> _Mark:
        text = self._viewport.line(target.pos.line)
        base = target.pos.col - 1
        index = byte_to_char_index(text, base + target.start)
        base_char = text[index] if index < len(text) else " "
        # Pad the label to the width of the character it covers so wide
        # characters do not shift the rest of the line.
        label = target.char.rjust(char_width(base_char))

        span = None
        if not self._disable_match_highlight:
            span = (index, byte_to_char_index(text, base + target.end))

        return _Mark(target.pos.line, index, label, primary, span)

    def render_frame(self) -> str:
        rows = self._terminal.rows
        out: list[str] = []

        for row in range(min(self._viewport.height, rows - 1)):
            number = self._viewport.top + row
            out.append(f"\x1b[{row + 1};1H\x1b[2K")
            if number <= len(self._viewport.lines):
                out.append(self._render_line(number))

        out.append(f"\x1b[{rows};1H\x1b[2K")
        if self._prompt is not None:
            out.append(self._theme.prompt(PROMPT_PREFIX + self._prompt))

        return "".join(out)

    def _render_line(self, number: int) -> str:
        text = self._viewport.line(number).replace("\t", " ")
        plain: Callable[[str], str] = self._theme.shade if self._shaded else (lambda s: s)
        cells: list[tuple[str, Callable[[str], str]]] = [(ch, plain) for ch in text]

        marks = [m for m in self._marks if m.line == number]
        for mark in marks:
            if mark.span is not None:
                start, end = mark.span
                for i in range(start, min(end, len(cells))):
                    cells[i] = (cells[i][0], self._theme.match)
        for mark in marks:
            style = self._theme.char if mark.primary else self._theme.sub_char
            if mark.index < len(cells):
                cells[mark.index] = (mark.label, style)
            else:
                cells.append((mark.label, style))

        return _join_cells(cells, self._terminal.columns)


def _join_cells(cells: list[tuple[str, Callable[[str], str]]], columns: int) -> str:
    """Style runs of cells, truncated to *columns* display cells."""
    runs: list[tuple[Callable[[str], str], list[str]]] = []
    width = 0

    for text, style in cells:
        w = visible_width(text)
        if width + w > columns:
            break
        width += w
        if runs and runs[-1][0] is style:
            runs[-1][1].append(text)
        else:
            runs.append((style, [text]))

    return "".join(style("".join(parts)) for style, parts in runs)
