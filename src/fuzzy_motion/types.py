"""Core value types shared by the extractor, matchers and label assigner."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """Buffer position. ``line`` is 1-based, ``col`` is a 1-based byte column."""

    line: int
    col: int


@dataclass(frozen=True)
class Word:
    """A candidate word found on screen."""

    text: str
    pos: Position


@dataclass(frozen=True)
class MatchResult:
    """A matcher hit inside a word.

    ``start`` and ``end`` are byte offsets into ``word.text`` delimiting the
    matched span.
    """

    word: Word
    start: int
    end: int
    score: float

    @property
    def effective_position(self) -> tuple[int, int]:
        return (self.word.pos.line, self.word.pos.col + self.start)


# (line, col, start)
TargetKey = tuple[int, int, int]


@dataclass(frozen=True)
class Target:
    """A labeled, jumpable match."""

    text: str
    start: int
    end: int
    pos: Position
    score: float
    char: str

    @property
    def key(self) -> TargetKey:
        return (self.pos.line, self.pos.col, self.start)

    @property
    def jump_position(self) -> Position:
        return Position(self.pos.line, self.pos.col + self.start)

    def to_dict(self) -> dict[str, object]:
        return {
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "pos": {"line": self.pos.line, "col": self.pos.col},
            "score": self.score,
            "char": self.char,
        }
