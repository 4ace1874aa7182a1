"""Word extraction: scan visible lines for jump candidates."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from fuzzy_motion.types import Position, Word
from fuzzy_motion.utils import byte_length


def extract_words(
    lines: Iterable[str],
    start_line: int,
    word_patterns: Sequence[re.Pattern[str]],
    filter_patterns: Sequence[re.Pattern[str]] = (),
) -> list[Word]:
    """Collect every match of every word pattern, line by line.

    Patterns are applied in order on each line, so overlapping candidates
    from different patterns are all kept; duplicates collapse later in the
    aggregator. A word survives only if every filter pattern matches it.
    """
    words: list[Word] = []

    for offset, line in enumerate(lines):
        for pattern in word_patterns:
            for m in pattern.finditer(line):
                if m.start() == m.end():
                    continue
                words.append(
                    Word(
                        text=m.group(0),
                        pos=Position(
                            line=start_line + offset,
                            col=byte_length(line[: m.start()]) + 1,
                        ),
                    )
                )

    for pattern in filter_patterns:
        words = [w for w in words if pattern.search(w.text) is not None]

    return words
