"""Matcher back-ends.

Each back-end is a pure function ``(query, words) -> list[MatchResult]``.
The set is closed; :class:`MatcherKind` names the members and
:func:`run_matcher` dispatches on it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum

from fuzzy_motion.matchers import fuzzy, transliteration
from fuzzy_motion.types import MatchResult, Word

MatchFn = Callable[[str, Sequence[Word]], list[MatchResult]]


class MatcherKind(str, Enum):
    FUZZY = "fuzzy"
    TRANSLITERATION = "transliteration"


# Alternate names accepted in settings and on the command line.
MATCHER_ALIASES: dict[str, MatcherKind] = {
    "fzf": MatcherKind.FUZZY,
    "kensaku": MatcherKind.TRANSLITERATION,
}

_MATCHERS: dict[MatcherKind, MatchFn] = {
    MatcherKind.FUZZY: fuzzy.match_words,
    MatcherKind.TRANSLITERATION: transliteration.match_words,
}


def parse_matcher(name: str) -> MatcherKind:
    """Resolve a configured matcher name. Raises ``ValueError`` if unknown."""
    key = name.strip().lower()
    if key in MATCHER_ALIASES:
        return MATCHER_ALIASES[key]
    return MatcherKind(key)


def run_matcher(kind: MatcherKind, query: str, words: Sequence[Word]) -> list[MatchResult]:
    return _MATCHERS[kind](query, words)


__all__ = [
    "MATCHER_ALIASES",
    "MatchFn",
    "MatcherKind",
    "parse_matcher",
    "run_matcher",
]
