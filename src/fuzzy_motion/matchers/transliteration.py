"""Linear, transliteration-aware matcher.

Both the query and each word are folded before comparison: compatibility
decomposition (NFKD), combining marks dropped, then casefolded. So ``"cafe"``
finds ``"Café"``, ``"strasse"`` finds ``"Straße"`` and ``"fi"`` finds the
``"ﬁ"`` ligature. Words are scanned in order and the first occurrence in
each word is reported; no ranking is applied.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

from fuzzy_motion.types import MatchResult, Word
from fuzzy_motion.utils import char_to_byte_offset


def fold_and_map(text: str) -> tuple[str, list[int]]:
    """Fold *text* for matching and map each folded index to its source index.

    Returns:
      - the folded string
      - mapping list: folded index -> index in the ORIGINAL string
    """
    out_chars: list[str] = []
    mapping: list[int] = []

    for orig_i, ch in enumerate(text):
        for part in unicodedata.normalize("NFKD", ch):
            if unicodedata.combining(part):
                continue
            for folded in part.casefold():
                out_chars.append(folded)
                mapping.append(orig_i)

    return "".join(out_chars), mapping


def fold(text: str) -> str:
    return fold_and_map(text)[0]


def match_words(query: str, words: Sequence[Word]) -> list[MatchResult]:
    needle = fold(query)
    if not needle:
        return []

    results: list[MatchResult] = []

    for word in words:
        haystack, mapping = fold_and_map(word.text)
        index = haystack.find(needle)
        if index < 0:
            continue

        start = mapping[index]
        end = mapping[index + len(needle) - 1] + 1
        results.append(
            MatchResult(
                word=word,
                start=char_to_byte_offset(word.text, start),
                end=char_to_byte_offset(word.text, end),
                score=index,
            )
        )

    return results
