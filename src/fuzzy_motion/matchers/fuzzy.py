"""Fuzzy-score matcher.

Matches if all query characters appear in order (not necessarily consecutive).
Lower score = better match.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from fuzzy_motion.types import MatchResult, Word
from fuzzy_motion.utils import char_to_byte_offset

_WORD_BOUNDARY_RE = re.compile(r"[\s\-_./:]")
_ALPHA_NUM_RE = re.compile(r"^(?P<letters>[a-z]+)(?P<digits>[0-9]+)$")
_NUM_ALPHA_RE = re.compile(r"^(?P<digits>[0-9]+)(?P<letters>[a-z]+)$")


@dataclass
class FuzzyMatch:
    matches: bool
    score: float
    # Character span [start, end) covering the matched characters.
    start: int = 0
    end: int = 0


def _fold_case(text: str) -> str:
    # One output character per input character keeps indices aligned.
    return "".join(ch.lower()[0] for ch in text)


def fuzzy_match(query: str, text: str) -> FuzzyMatch:
    query_lower = _fold_case(query)
    text_lower = _fold_case(text)

    def match_query(normalized_query: str) -> FuzzyMatch:
        if len(normalized_query) == 0:
            return FuzzyMatch(matches=True, score=0)

        if len(normalized_query) > len(text_lower):
            return FuzzyMatch(matches=False, score=0)

        query_index = 0
        score: float = 0
        first_match_index = -1
        last_match_index = -1
        consecutive_matches = 0

        for i in range(len(text_lower)):
            if query_index >= len(normalized_query):
                break
            if text_lower[i] == normalized_query[query_index]:
                is_word_boundary = i == 0 or bool(
                    _WORD_BOUNDARY_RE.match(text_lower[i - 1])
                )

                if last_match_index == i - 1:
                    consecutive_matches += 1
                    score -= consecutive_matches * 5
                else:
                    consecutive_matches = 0
                    if last_match_index >= 0:
                        score += (i - last_match_index - 1) * 2

                if is_word_boundary:
                    score -= 10

                score += i * 0.1

                if first_match_index < 0:
                    first_match_index = i
                last_match_index = i
                query_index += 1

        if query_index < len(normalized_query):
            return FuzzyMatch(matches=False, score=0)

        return FuzzyMatch(
            matches=True,
            score=score,
            start=first_match_index,
            end=last_match_index + 1,
        )

    primary_match = match_query(query_lower)
    if primary_match.matches:
        return primary_match

    alpha_numeric_match = _ALPHA_NUM_RE.match(query_lower)
    numeric_alpha_match = _NUM_ALPHA_RE.match(query_lower)

    if alpha_numeric_match:
        swapped_query = (
            alpha_numeric_match.group("digits") + alpha_numeric_match.group("letters")
        )
    elif numeric_alpha_match:
        swapped_query = (
            numeric_alpha_match.group("letters") + numeric_alpha_match.group("digits")
        )
    else:
        swapped_query = ""

    if not swapped_query:
        return primary_match

    swapped_match = match_query(swapped_query)
    if not swapped_match.matches:
        return primary_match

    return FuzzyMatch(
        matches=True,
        score=swapped_match.score + 5,
        start=swapped_match.start,
        end=swapped_match.end,
    )


def match_words(query: str, words: Sequence[Word]) -> list[MatchResult]:
    """Match *query* against every word, best matches first.

    Supports space-separated tokens: all tokens must match, and the reported
    span covers every token's match. Ties keep word order.
    """
    tokens = [t for t in query.split() if len(t) > 0]

    if not tokens:
        return []

    results: list[MatchResult] = []

    for word in words:
        total_score: float = 0
        start = len(word.text)
        end = 0
        all_match = True

        for token in tokens:
            match = fuzzy_match(token, word.text)
            if not match.matches:
                all_match = False
                break
            total_score += match.score
            start = min(start, match.start)
            end = max(end, match.end)

        if all_match:
            results.append(
                MatchResult(
                    word=word,
                    start=char_to_byte_offset(word.text, start),
                    end=char_to_byte_offset(word.text, end),
                    score=total_score,
                )
            )

    results.sort(key=lambda r: r.score)
    return results
